"""buildstamp - embed the state of a git working tree into a build."""

from .encoder import ArtifactEncoder
from .errors import BuildstampError, EncodingDefect, ExecutionError, QueryError, SetupError
from .git import CommandResult, GitCommand, find_git
from .reader import RepoStateReader
from .snapshot import RepoSnapshot

__all__ = [
    'ArtifactEncoder',
    'BuildstampError',
    'CommandResult',
    'EncodingDefect',
    'ExecutionError',
    'GitCommand',
    'QueryError',
    'RepoSnapshot',
    'RepoStateReader',
    'SetupError',
    'find_git',
]
