from api_doc_registry.errors import (
    DefinedParamError,
    ParamError,
    ParamInvalid,
    ParamMissing,
    UnknownParam,
)
from api_doc_registry.registry.descriptions import MethodDescription, ResourceDescription
from api_doc_registry.registry.dsl import MethodDsl, ParamDsl


def _make_method(params: list[ParamDsl]) -> MethodDescription:
    resource = ResourceDescription(object, "users", "v1")
    return MethodDescription("create", resource, MethodDsl(params=params))


class TestParamMissing:
    def test_default_message(self):
        method = _make_method([ParamDsl(name="age", param_type="integer", required=True)])
        error = ParamMissing(method.param("age"), method)
        assert str(error) == "Missing parameter age"
        assert isinstance(error, DefinedParamError)
        assert isinstance(error, ParamError)

    def test_custom_message(self):
        method = _make_method([ParamDsl(name="age", required=True, missing_message="Age, please")])
        assert str(ParamMissing(method.param("age"), method)) == "Age, please"

    def test_callable_message_evaluated_at_report_time(self):
        calls = []

        def message():
            calls.append(1)
            return "computed"

        method = _make_method([ParamDsl(name="age", required=True, missing_message=message)])
        error = ParamMissing(method.param("age"), method)
        assert calls == []
        assert str(error) == "computed"

    def test_path_prepends_missing_name(self):
        method = _make_method([
            ParamDsl(name="user", param_type="object", params=[ParamDsl(name="address", param_type="object")]),
        ])
        address = method.param("user").param("address")
        error = ParamMissing(ParamDsl(name="city"), address)
        assert error.parameter_path == ["city", "user", "address"]


class TestUnknownParam:
    def test_message_and_path(self):
        method = _make_method([ParamDsl(name="user", param_type="object")])
        error = UnknownParam("nickname", method.param("user"))
        assert str(error) == "Unknown parameter nickname"
        assert error.parameter_path == ["user"]


class TestParamInvalid:
    def test_message(self):
        method = _make_method([ParamDsl(name="age", param_type="integer")])
        error = ParamInvalid("age", "abc", "Must be a number.", method)
        assert str(error) == "Invalid parameter 'age' value 'abc': Must be a number."
        assert error.value == "abc"
        assert error.error == "Must be a number."
        assert error.parameter_path == []
