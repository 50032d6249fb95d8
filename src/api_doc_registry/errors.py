"""Error hierarchy for the documentation registry.

Resolution errors signal a configuration or annotation defect and are
raised straight to the caller. Lookup misses are not errors: lookups
return None instead.

The ParamError branch is the vocabulary a parameter validator raises for
malformed requests; each error knows the path of the offending parameter
inside its method's schema.
"""


class ApiDocError(Exception):
    """Base class for all registry errors."""


class ConfigError(ApiDocError):
    """Configuration file could not be loaded."""


class ResolutionError(ApiDocError, ValueError):
    """A name, reference or verb could not be resolved."""


class ParamGroupNotDefined(ResolutionError):
    def __init__(self, key: str):
        super().__init__(f"param group {key} not defined")
        self.key = key


class VerbClassificationError(ResolutionError):
    def __init__(self, path: str):
        super().__init__(f"Unknown verb {path}")
        self.path = path


class ParamError(ApiDocError):
    """Base class for parameter validation failures."""


class DefinedParamError(ParamError):
    """A failure tied to a parameter of a registered schema.

    Attributes:
        param: the schema node (or bare name) the failure is about.
        param_description: the schema that owns ``param``.
    """

    def __init__(self, param, param_description):
        super().__init__()
        self.param = param
        self.param_description = param_description

    @property
    def parameter_path(self) -> list[str]:
        return list(self.param_description.parents_path)

    def __str__(self) -> str:
        return f"{type(self).__name__} for {_name_of(self.param)}"


class ParamMissing(DefinedParamError):
    """A required parameter was not supplied."""

    @property
    def parameter_path(self) -> list[str]:
        # the absent parameter is not part of its owner's path yet
        return [_name_of(self.param)] + list(self.param_description.parents_path)

    def __str__(self) -> str:
        missing_message = getattr(self.param, "missing_message", None)
        if missing_message is None:
            return f"Missing parameter {_name_of(self.param)}"
        if callable(missing_message):
            return str(missing_message())
        return str(missing_message)


class UnknownParam(DefinedParamError):
    """A parameter not declared in the schema was supplied."""

    def __str__(self) -> str:
        return f"Unknown parameter {_name_of(self.param)}"


class ParamInvalid(DefinedParamError):
    """A parameter value failed its validator.

    Attributes:
        value: the offending value.
        error: the underlying cause reported by the validator.
    """

    def __init__(self, param, value, error, param_description):
        super().__init__(param, param_description)
        self.value = value
        self.error = error

    def __str__(self) -> str:
        return f"Invalid parameter '{_name_of(self.param)}' value {self.value!r}: {self.error}"


def _name_of(param) -> str:
    return str(getattr(param, "name", param))
