from __future__ import annotations

from pathlib import Path

import pytest

from cutrelease.core.errors import ErrorCode
from cutrelease.core.result import Err, Ok
from cutrelease.release.errors import release_exit_code
from cutrelease.release.validate import parse_request, validate_version


@pytest.mark.parametrize("version", ["1.0.0", "0.0.1", "10.20.30", "1.2.3-beta", "1.2.3-rc.1"])
def test_valid_versions(version: str) -> None:
    assert validate_version(version) == Ok(f"v{version}")


@pytest.mark.parametrize(
    "version",
    [
        "1.0",
        "1.0.0.0",
        "1.0.0-",
        "1.0.0-rc.12",
        "1.0.0+build",
        "a.b.c",
        "",
        "1.0.0-rc.x",
        "١.٠.٠",
        "1.0.0\n",
    ],
)
def test_malformed_versions(version: str) -> None:
    result = validate_version(version)
    assert isinstance(result, Err)
    assert result.error.kind == "malformed_version"
    assert "v<major>.<minor>.<patch>" in (result.error.hint or "")


def test_leading_v_is_rejected_even_when_well_formed() -> None:
    result = validate_version("v1.0.0")
    assert isinstance(result, Err)
    assert result.error.kind == "malformed_version"
    assert "leading 'v'" in (result.error.hint or "")


def test_leading_v_rejected_before_grammar_check() -> None:
    result = validate_version("vgarbage")
    assert isinstance(result, Err)
    assert "must not start with 'v'" in result.error.message


@pytest.mark.parametrize("args", [[], ["1.0.0"]])
def test_fewer_than_two_args_is_usage_error(args: list[str]) -> None:
    result = parse_request(args)
    assert isinstance(result, Err)
    assert result.error.kind == "usage"
    assert release_exit_code(result.error.kind) == ErrorCode.USAGE_ERROR


def test_parse_request_builds_request() -> None:
    result = parse_request(["1.2.3", "notes.md"], force_tag=True)
    assert isinstance(result, Ok)
    request = result.value
    assert request.version == "1.2.3"
    assert request.tag == "v1.2.3"
    assert request.notes_path == Path("notes.md")
    assert request.force_tag is True
    assert request.publish_only is False


def test_publish_only_needs_only_the_version() -> None:
    result = parse_request(["1.2.3"], publish_only=True)
    assert isinstance(result, Ok)
    assert result.value.notes_path is None


def test_request_is_frozen() -> None:
    result = parse_request(["1.2.3", "notes.md"])
    assert isinstance(result, Ok)
    with pytest.raises(AttributeError):
        result.value.version = "2.0.0"  # type: ignore[misc]
