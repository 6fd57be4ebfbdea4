from pathlib import Path


class SkillForgeError(Exception):
    """Base user-facing application error."""


class SkillForgeFileError(SkillForgeError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class ConfigError(SkillForgeFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config file ({detail})")


class HistoryFormatError(SkillForgeFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid history file ({detail})")


class UnsupportedMediaError(SkillForgeError):
    """Media cannot be submitted for analysis."""


class CaptureError(SkillForgeError):
    """Screen capture could not be started or finished."""


class CapturePermissionDenied(CaptureError):
    """The user cancelled capture or the recorder was not permitted to run."""


class AnalysisError(SkillForgeError):
    """Base class for every failure of the analysis call."""

    kind = "analysis"


class AnalysisServiceError(AnalysisError):
    kind = "service"


class EmptyResponseError(AnalysisError):
    kind = "empty_response"


class SchemaViolationError(AnalysisError):
    kind = "schema_violation"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Skill package does not match schema ({detail})")


class InvalidTransitionError(SkillForgeError):
    def __init__(self, state: str, event: str) -> None:
        self.state = state
        self.event = event
        super().__init__(f"Cannot {event} while {state}")


class SkillNotFoundError(SkillForgeError, KeyError):
    def __init__(self, skill_id: str) -> None:
        self.skill_id = skill_id
        super().__init__(f"Skill not found: {skill_id}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownFileError(SkillForgeError, KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No such file in package: {name}")

    def __str__(self) -> str:
        return self.args[0]
