"""
FR 위의 행렬 유틸리티
======================

Poseidon 파라미터 변환(MDS 역행렬, 희소 행렬 분해)에 필요한 최소한의
행렬 연산을 제공한다. 행렬은 행 우선(row-major) 중첩 리스트이며,
모든 원소는 FR이다.

**표기 규칙**:
  "표준" 선형 변환은 new[i] = Σ_j A[i][j]·s[j] (수학적 행렬-벡터 곱)이다.
  라운드 프리미티브는 M[j][i] 방식(전치 접근)으로 저장된 행렬을 쓰므로,
  표준 행렬 A는 transpose(A)로 저장된다.

사용 예시:
    >>> A = [[FR(2), FR(1)], [FR(1), FR(1)]]
    >>> matrix_multiply(A, matrix_inverse(A)) == identity_matrix(2)  # True
"""

from zkposeidon.field import FR


def zeros_matrix(rows, cols):
    """rows × cols 영행렬."""
    return [[FR(0) for _ in range(cols)] for _ in range(rows)]


def identity_matrix(n):
    """n × n 단위행렬."""
    m = zeros_matrix(n, n)
    for i in range(n):
        m[i][i] = FR(1)
    return m


def transpose(m):
    """전치 행렬."""
    return [list(col) for col in zip(*m)]


def column(m, index):
    """index번째 열을 리스트로 반환한다."""
    return [row[index] for row in m]


def check_squareness(m, n):
    """m이 n × n 정방행렬인지 확인한다."""
    return len(m) == n and all(len(row) == n for row in m)


def matrix_vector_multiply(m, v):
    """표준 행렬-벡터 곱: out[i] = Σ_j m[i][j]·v[j]."""
    out = []
    for row in m:
        acc = FR(0)
        for a, x in zip(row, v):
            acc = acc + a * x
        out.append(acc)
    return out


def matrix_multiply(a, b):
    """행렬 곱 a·b."""
    cols = transpose(b)
    return [[sum((x * y for x, y in zip(row, col)), FR(0)) for col in cols] for row in a]


def matrix_inverse(m):
    """가우스-조던 소거법으로 역행렬을 구한다.

    Args:
        m: n × n FR 행렬

    Returns:
        list[list[FR]]: m⁻¹

    Raises:
        ValueError: 정방행렬이 아니거나 특이(singular) 행렬일 때
    """
    n = len(m)
    if not check_squareness(m, n):
        raise ValueError("정방행렬만 역행렬을 구할 수 있습니다")

    # 확대 행렬 [m | I]
    aug = [list(row) + unit for row, unit in zip(m, identity_matrix(n))]

    for col in range(n):
        pivot = next((r for r in range(col, n) if aug[r][col] != FR(0)), None)
        if pivot is None:
            raise ValueError("특이 행렬은 역행렬이 없습니다")
        aug[col], aug[pivot] = aug[pivot], aug[col]

        inv = FR(1) / aug[col][col]
        aug[col] = [x * inv for x in aug[col]]

        for r in range(n):
            if r != col and aug[r][col] != FR(0):
                factor = aug[r][col]
                aug[r] = [x - factor * y for x, y in zip(aug[r], aug[col])]

    return [row[n:] for row in aug]
