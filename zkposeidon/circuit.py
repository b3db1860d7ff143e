"""
PLONK 회로 빌더 (Constraint-building environment)
===================================================

Poseidon을 add / mul 호출로 실행하면서 각 호출을 PLONK 게이트로 기록한다.

**PLONK 게이트 구조**:
  각 게이트는 3개의 배선(wire) a, b, c와 5개의 셀렉터(selector)로 구성:

    q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C = 0

**빌더가 만드는 게이트 유형**:
  | 유형        | q_L | q_R | q_O | q_M | q_C | 의미            |
  |-------------|-----|-----|-----|-----|-----|-----------------|
  | 곱셈        |  0  |  0  | -1  |  1  |  0  | a·b = c         |
  | 상수 곱셈   |  k  |  0  | -1  |  0  |  0  | k·a = c         |
  | 덧셈        |  1  |  1  | -1  |  0  |  0  | a + b = c       |
  | 상수 덧셈   |  1  |  0  | -1  |  0  |  k  | a + k = c       |
  | 상수 고정   |  1  |  0  |  0  |  0  | -k  | a = k           |

**배선(Copy) 제약**:
  변수(Variable)가 처음 등장한 위치를 기준으로, 이후 다른 게이트에서
  사용될 때마다 "기준 위치 == 사용 위치" 제약을 추가한다.
  예: 게이트 0의 출력(c)이 게이트 1의 입력(a)으로 쓰이면 (0, 2) == (1, 0).

사용 예시:
    >>> builder = CircuitBuilder()
    >>> x = builder.input(3)
    >>> y = builder.mul(x, x)          # 게이트 0: x·x = 9
    >>> z = builder.add(y, 5)          # 게이트 1: 9 + 5 = 14
    >>> builder.check_witness()        # True
"""

from zkposeidon.field import FR, CURVE_ORDER, to_fr


# 배선 인덱스
WIRE_A = 0
WIRE_B = 1
WIRE_C = 2

MINUS_ONE = FR(CURVE_ORDER - 1)


class Gate:
    """PLONK 산술 게이트.

    게이트 방정식: q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C = 0
    """

    def __init__(self, q_l, q_r, q_o, q_m, q_c):
        """게이트를 생성한다.

        Args:
            q_l: 왼쪽 입력 셀렉터 (FR 원소 또는 정수)
            q_r: 오른쪽 입력 셀렉터
            q_o: 출력 셀렉터
            q_m: 곱셈 셀렉터
            q_c: 상수 셀렉터
        """
        self.q_l = to_fr(q_l)
        self.q_r = to_fr(q_r)
        self.q_o = to_fr(q_o)
        self.q_m = to_fr(q_m)
        self.q_c = to_fr(q_c)

    def check(self, a, b, c):
        """게이트 제약이 만족되는지 확인한다.

        Args:
            a, b, c: 배선 값 (FR 원소 또는 정수)

        Returns:
            bool: 제약 만족 여부
        """
        a, b, c = to_fr(a), to_fr(b), to_fr(c)
        result = (
            self.q_l * a
            + self.q_r * b
            + self.q_o * c
            + self.q_m * (a * b)
            + self.q_c
        )
        return result == FR(0)


class Circuit:
    """PLONK 산술 회로.

    게이트 리스트와 배선 연결(copy constraint) 정보를 관리한다.

    속성:
        gates: Gate 객체 리스트
        copy_constraints: (i1, j1, i2, j2) 튜플 리스트
            - 게이트 i1의 j1번째 배선 == 게이트 i2의 j2번째 배선
            - j=0: a(왼쪽), j=1: b(오른쪽), j=2: c(출력)
    """

    def __init__(self):
        self.gates = []
        self.copy_constraints = []

    @property
    def n(self):
        """게이트 수."""
        return len(self.gates)

    def add_multiplication_gate(self):
        """곱셈 게이트 추가: a · b = c."""
        return self._append(Gate(0, 0, MINUS_ONE, 1, 0))

    def add_scale_gate(self, constant):
        """상수 곱셈 게이트 추가: constant · a = c."""
        return self._append(Gate(constant, 0, MINUS_ONE, 0, 0))

    def add_addition_gate(self):
        """덧셈 게이트 추가: a + b = c."""
        return self._append(Gate(1, 1, MINUS_ONE, 0, 0))

    def add_constant_gate(self, constant):
        """상수 덧셈 게이트 추가: a + constant = c."""
        return self._append(Gate(1, 0, MINUS_ONE, 0, constant))

    def add_pin_gate(self, constant):
        """상수 고정 게이트 추가: a = constant."""
        return self._append(Gate(1, 0, 0, 0, -to_fr(constant)))

    def _append(self, gate):
        self.gates.append(gate)
        return len(self.gates) - 1

    def add_copy_constraint(self, gate1, wire1, gate2, wire2):
        """배선 복사 제약 추가: 게이트1.wire1 == 게이트2.wire2."""
        self.copy_constraints.append((gate1, wire1, gate2, wire2))

    def get_selector_polynomials(self):
        """셀렉터 벡터 (q_L, q_R, q_O, q_M, q_C)를 반환한다."""
        q_l = [g.q_l for g in self.gates]
        q_r = [g.q_r for g in self.gates]
        q_o = [g.q_o for g in self.gates]
        q_m = [g.q_m for g in self.gates]
        q_c = [g.q_c for g in self.gates]
        return q_l, q_r, q_o, q_m, q_c

    def build_copy_constraints(self):
        """배선 순열(permutation) σ를 구성한다.

        3n개의 배선 위치 (a₀..a_{n-1}, b₀..b_{n-1}, c₀..c_{n-1})에 대해
        같은 값을 가져야 하는 위치들을 순환(cycle)으로 연결한다.

        Returns:
            list[int]: 길이 3n의 순열 배열
        """
        n = self.n
        # 인덱스 규칙: a의 i번째 = i, b의 i번째 = n+i, c의 i번째 = 2n+i
        sigma = list(range(3 * n))

        for g1, w1, g2, w2 in self.copy_constraints:
            pos1 = w1 * n + g1
            pos2 = w2 * n + g2
            # 두 위치가 서로 다른 순환에 있을 때 교환하면 하나의 순환으로 합쳐진다
            sigma[pos1], sigma[pos2] = sigma[pos2], sigma[pos1]

        return sigma


class Variable:
    """회로 안의 값(배선).

    속성:
        value: 위트니스 값 (FR)
        position: 처음 배치된 (게이트, 배선) 위치. 아직 게이트에 쓰이지 않았으면 None
        name: 디버깅용 이름
    """

    def __init__(self, value, position=None, name=None):
        self.value = value
        self.position = position
        self.name = name

    def __repr__(self):
        label = self.name or "var"
        return f"Variable({label}={int(self.value)})"


class CircuitBuilder(Circuit):
    """add / mul 호출을 게이트로 기록하는 회로 빌더.

    NativeAPI와 같은 인터페이스(element, constant, add, mul)를 제공하므로
    Poseidon 코드를 바꾸지 않고 회로를 만들 수 있다.

    속성:
        witness: 게이트별 (a, b, c) 배선 값 리스트
        gate_kinds: 게이트별 유형 ("add", "mul", "const")
        inputs: input()으로 할당된 변수 리스트
    """

    def __init__(self):
        super().__init__()
        self.witness = []
        self.gate_kinds = []
        self.inputs = []

    # ── 변수 할당 ──

    def input(self, value, name=None):
        """외부 입력 변수를 할당한다 (게이트 없음)."""
        var = Variable(to_fr(value), name=name or f"in{len(self.inputs)}")
        self.inputs.append(var)
        return var

    def constant(self, value):
        """값이 고정된 변수를 만든다 (상수 고정 게이트 1개)."""
        value = to_fr(value)
        var = Variable(value, name=f"const{int(value)}")
        self._record(self.add_pin_gate(value), "const", var, FR(0), FR(0))
        return var

    def element(self, value):
        if isinstance(value, Variable):
            return value
        return self.constant(value)

    # ── 산술 연산 ──

    def add(self, a, b):
        """a + b. 둘 다 상수면 게이트 없이 접어서(fold) FR로 반환한다."""
        if not isinstance(a, Variable) and not isinstance(b, Variable):
            return to_fr(a) + to_fr(b)
        if not isinstance(a, Variable):
            a, b = b, a
        if isinstance(b, Variable):
            out = Variable(a.value + b.value)
            self._record(self.add_addition_gate(), "add", a, b, out)
        else:
            k = to_fr(b)
            out = Variable(a.value + k)
            self._record(self.add_constant_gate(k), "add", a, FR(0), out)
        return out

    def mul(self, a, b):
        """a · b. 둘 다 상수면 게이트 없이 접어서(fold) FR로 반환한다."""
        if not isinstance(a, Variable) and not isinstance(b, Variable):
            return to_fr(a) * to_fr(b)
        if not isinstance(a, Variable):
            a, b = b, a
        if isinstance(b, Variable):
            out = Variable(a.value * b.value)
            self._record(self.add_multiplication_gate(), "mul", a, b, out)
        else:
            k = to_fr(b)
            out = Variable(a.value * k)
            self._record(self.add_scale_gate(k), "mul", a, FR(0), out)
        return out

    def _record(self, index, kind, a, b, c):
        """게이트 index의 위트니스 행을 기록하고 copy constraint를 연결한다."""
        row = []
        for wire, operand in ((WIRE_A, a), (WIRE_B, b), (WIRE_C, c)):
            if isinstance(operand, Variable):
                if operand.position is None:
                    operand.position = (index, wire)
                else:
                    g, w = operand.position
                    self.add_copy_constraint(g, w, index, wire)
                row.append(operand.value)
            else:
                row.append(to_fr(operand))
        self.witness.append(tuple(row))
        self.gate_kinds.append(kind)

    # ── 검사 ──

    def count(self, kind):
        """kind 유형 게이트 수."""
        return sum(1 for k in self.gate_kinds if k == kind)

    def wire_values(self):
        """배선 값 벡터 (a_vals, b_vals, c_vals)."""
        a_vals = [row[WIRE_A] for row in self.witness]
        b_vals = [row[WIRE_B] for row in self.witness]
        c_vals = [row[WIRE_C] for row in self.witness]
        return a_vals, b_vals, c_vals

    def check_witness(self):
        """모든 게이트 방정식과 copy constraint가 위트니스로 만족되는지 확인한다."""
        for gate, (a, b, c) in zip(self.gates, self.witness):
            if not gate.check(a, b, c):
                return False
        for g1, w1, g2, w2 in self.copy_constraints:
            if self.witness[g1][w1] != self.witness[g2][w2]:
                return False
        return True
