"""
Poseidon 기반 모듈: 유한체(Finite Field)
==========================================

Poseidon 순열과 회로 빌더가 공유하는 기본 산술 단위를 정의한다.

**유한체 FR**:
  bn128(BN254) 타원곡선의 스칼라 필드 (scalar field).
  circomlib / go-iden3-crypto의 Poseidon과 같은 필드이며,
  Groth16·PLONK 회로의 배선 값도 모두 이 필드 위에 있다.
  - 위수(order) p ≈ 2^254, 소수체(prime field)
  - gcd(5, p - 1) = 1 → x ↦ x^5 는 FR 위의 순열(permutation)

사용 예시:
    >>> from zkposeidon.field import FR, to_fr
    >>> a = FR(3)
    >>> a * a * a * a * a   # FR(243)
    >>> to_fr("0x10")       # FR(16)
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    예시:
        >>> x = FR(3)
        >>> x * x          # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order

# 필드 원소의 비트 길이 (Grain LFSR 초기화에 사용: n = 254)
FIELD_BITS = CURVE_ORDER.bit_length()


def to_fr(value):
    """정수, 문자열, FR 중 하나를 FR 원소로 변환한다.

    문자열은 10진수 또는 "0x" 접두사의 16진수를 허용한다.
    음수와 p 이상의 값은 mod p로 축약된다.

    Args:
        value: int, str 또는 FR

    Returns:
        FR: 변환된 필드 원소

    Raises:
        TypeError: 지원하지 않는 타입일 때 (bool 포함)
        ValueError: 문자열을 정수로 해석할 수 없을 때
    """
    if isinstance(value, FR):
        return value
    if isinstance(value, bool):
        raise TypeError("bool은 필드 원소로 변환할 수 없습니다")
    if isinstance(value, FQ):
        return FR(int(value))
    if isinstance(value, int):
        return FR(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("0x"):
            return FR(int(text, 16))
        return FR(int(text, 10))
    raise TypeError(f"필드 원소로 변환할 수 없는 타입입니다: {type(value).__name__}")
