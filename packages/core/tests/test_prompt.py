"""Tests for prompt construction."""

import pytest

from codelens_core.errors import EmptyInputError
from codelens_core.prompt import (
    CODE_BUNDLE_HEADER,
    DEFAULT_FOCUS,
    FINDING_INSTRUCTION,
    SYSTEM_INSTRUCTION,
    ReviewRequest,
    build_request,
)

UNIT = "// 파일: a.py\nx=1"


def test_system_instruction_is_fixed():
    assert build_request("security", UNIT).system_instruction == SYSTEM_INSTRUCTION
    assert build_request("performance", UNIT).system_instruction == SYSTEM_INSTRUCTION


def test_user_prompt_sections_in_order():
    prompt = build_request("security", UNIT).user_prompt
    assert prompt == "\n\n".join(["리뷰 포커스: security", FINDING_INSTRUCTION, CODE_BUNDLE_HEADER, UNIT])


def test_reviewable_unit_included_verbatim():
    unit = "// 수동 입력 코드\n  indented  \n\nlines"
    assert build_request(DEFAULT_FOCUS, unit).user_prompt.endswith(unit)


def test_focus_line_comes_first():
    prompt = build_request("테스트", UNIT).user_prompt
    assert prompt.splitlines()[0] == "리뷰 포커스: 테스트"


@pytest.mark.parametrize("unit", ["", "   ", "\n\t\n"])
def test_empty_unit_raises(unit):
    with pytest.raises(EmptyInputError):
        build_request("security", unit)


def test_messages_are_system_then_user():
    request = ReviewRequest(system_instruction="sys", user_prompt="usr")
    assert request.to_messages() == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "usr"},
    ]


def test_request_is_immutable():
    request = build_request("security", UNIT)
    with pytest.raises(AttributeError):
        request.user_prompt = "changed"  # type: ignore[misc]
