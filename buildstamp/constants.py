"""Constants and defaults for buildstamp."""


class GitQueries:
    """Argument lists for the queries issued against a working tree."""

    STATUS = ["status", "--porcelain", "-uno"]
    EXACT_TAG = ["describe", "--exact-match", "--tags"]
    CURRENT_BRANCH = ["branch", "--show-current"]
    HASH_AND_TIME = ["show", "-s", "--format=%H:%ct"]
    COMMIT_COUNT = ["rev-list", "--count", "HEAD"]
    TOPLEVEL = ["rev-parse", "--show-toplevel"]

    HASH_TIME_SEPARATOR = ":"


class BuildstampConstants:
    """Central defaults for the generator."""

    APP_NAME = "buildstamp"

    # External command lookup
    GIT_EXECUTABLE = "git"
    DEFAULT_SEARCH_PATH = "/usr/bin"  # Used when PATH is unset

    # Commit identity
    DIGEST_SIZE = 20  # sha1
    DIGEST_HEX_LENGTH = DIGEST_SIZE * 2

    # Timestamp of a clean tree whose commit time could not be read
    UNKNOWN_COMMIT_TIME = 0

    # Output
    DEFAULT_FORMAT = "swift"
    ATOMIC_SAVE_PREFIX = "."
    ATOMIC_SAVE_SUFFIX = ".tmp"
