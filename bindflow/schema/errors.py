"""Errors for diagram and config files."""

from pydantic import ValidationError


class SchemaError(Exception):
    """Base class for diagram and config file errors."""


class SchemaLoadError(SchemaError):
    """A file is missing, unreadable, not YAML, or not a YAML mapping."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class SchemaValidationError(SchemaError):
    """Parsed YAML does not describe a valid diagram or config.

    `errors` holds one `{loc, msg, type}` dict per pydantic error, with `loc`
    joined into a dotted path such as `pools.Robot.tasks.Grab.kind`.
    """

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, what: str, exc: ValidationError) -> "SchemaValidationError":
        errors = [
            {
                "loc": ".".join(str(part) for part in err["loc"]) or "(root)",
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return cls(f"Invalid {what}: {len(errors)} error(s)", errors)

    def lines(self) -> list[str]:
        """One `loc: msg` line per error."""
        return [f"{err['loc']}: {err['msg']}" for err in self.errors]
