"""Prompt construction for a review run."""

from __future__ import annotations

from dataclasses import dataclass

from codelens_core.errors import EmptyInputError

SYSTEM_INSTRUCTION = (
    "당신은 꼼꼼한 시니어 엔지니어입니다. 구조화되고 우선순위가 정해진 코드 리뷰 피드백을 한국어로 제공하세요. "
    "각 발견 사항에 대해 실행 가능한 수정 사항, 추가할 테스트, 그리고 보안 또는 성능 문제를 강조하세요."
)

DEFAULT_FOCUS = "버그, 가독성, 유지보수성, 성능, 테스트"

FINDING_INSTRUCTION = (
    "각 발견 사항에 대해 심각도, 근본 원인, 구체적인 수정 사항을 제공해주세요. 모든 응답은 한국어로 작성해주세요."
)
CODE_BUNDLE_HEADER = "코드 묶음:"


@dataclass(frozen=True)
class ReviewRequest:
    system_instruction: str
    user_prompt: str

    def to_messages(self) -> list[dict]:
        return [
            {"role": "system", "content": self.system_instruction},
            {"role": "user", "content": self.user_prompt},
        ]


def build_request(focus: str, reviewable_unit: str) -> ReviewRequest:
    """Assemble the two-message request for one run.

    Section order is fixed: focus line, finding instruction, code bundle.
    Raises EmptyInputError when there is nothing to review.
    """
    if not reviewable_unit.strip():
        raise EmptyInputError()

    user_prompt = "\n\n".join(
        [
            f"리뷰 포커스: {focus}",
            FINDING_INSTRUCTION,
            CODE_BUNDLE_HEADER,
            reviewable_unit,
        ]
    )
    return ReviewRequest(system_instruction=SYSTEM_INSTRUCTION, user_prompt=user_prompt)
