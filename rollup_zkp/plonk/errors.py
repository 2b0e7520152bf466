"""
검증 실패 예외 계층
===================

모든 예외는 종결적(terminal)이다. 재시도나 부분 승인은 없으며,
처음 실패한 검사에서 즉시 호출 전체가 중단된다.

  VerificationError
  ├── MalformedProofError        배열 길이, 워드 범위, 곡선 방정식 위반
  │   └── InvalidPointError      y = 0, x ≠ 0 인 점의 부호 반전
  ├── DomainCollisionError       z^n - 1 = 0 (z가 도메인 위의 점)
  ├── QuotientEvaluationError    t(z)·Z_H(z) ≠ r(z) + r₀
  └── PrimitiveFailureError      곡선/페어링 라이브러리 자체의 실패

페어링 방정식 불일치는 예외가 아니라 verify()의 False 반환으로 표현된다.
"""


class VerificationError(Exception):
    """검증 중단 사유의 기반 클래스."""


class MalformedProofError(VerificationError, ValueError):
    """와이어 포맷 계약 위반 (산술 검사 이전에 발생)."""


class InvalidPointError(MalformedProofError):
    """곡선 위의 유효한 점이 아니다."""


class DomainCollisionError(VerificationError):
    """챌린지 z가 평가 도메인에 속해 소거 다항식이 0이 된다."""


class QuotientEvaluationError(VerificationError):
    """몫 다항식 항등식이 성립하지 않는다."""


class PrimitiveFailureError(VerificationError):
    """페어링/곡선 연산 프리미티브가 실행되지 못했다 (인프라 실패)."""
