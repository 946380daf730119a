class ArchiveError(Exception):
    status_code = 500


class MalformedTimestamp(ArchiveError):
    status_code = 400

    def __init__(self, text):
        super().__init__(f"malformed timestamp: {text!r}")
        self.text = text


class HostNotFound(ArchiveError):
    status_code = 404

    def __init__(self, host):
        super().__init__(f"unknown host: {host}")
        self.host = host


class SnapshotNotFound(ArchiveError):
    status_code = 404

    def __init__(self, host, stamp):
        super().__init__(f"no snapshot for {host} at {stamp}")
        self.host = host
        self.stamp = stamp


class NoSnapshotBeforeDate(ArchiveError):
    status_code = 404

    def __init__(self, host, stamp):
        super().__init__(f"no snapshot for {host} at or before {stamp}")
        self.host = host
        self.stamp = stamp


class StorageUnavailable(ArchiveError):
    status_code = 503


class DeadlineExceeded(ArchiveError):
    status_code = 504
