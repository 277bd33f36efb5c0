class ElfDiffError(Exception):
    """Base class for failures that end an elfsymdiff run."""


class ElfLoadError(ElfDiffError):
    def __init__(self, path, reason):
        super().__init__(f"Failed to load {path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigError(ElfDiffError):
    pass
