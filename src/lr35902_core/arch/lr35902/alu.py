"""
LR35902 ALU (算術論理演算ユニット) およびフラグ操作ユーティリティ。

演算結果に基づいた正確なフラグ（Z, N, H, C）の計算と更新を担当します。
全ての関数はFレジスタを `set_flags` で丸ごと上書きし、前の命令のフラグを暗黙に残しません。
保持すべきフラグがある命令は、その現在値を明示的に渡し直します。
"""
from lr35902_core.arch.lr35902.state import Lr35902CpuState

# @intent:responsibility 8ビット加算の結果に基づいて全フラグを更新します。
def update_flags_add8(state: Lr35902CpuState, val1: int, val2: int, result: int, carry_in: int = 0) -> None:
    """ADD/ADC命令のフラグを更新します。resultは切り詰め前の和です。"""
    state.set_flags(
        z=(result & 0xFF) == 0,
        n=False,
        # Half Carry: ビット3からのキャリー
        h=((val1 & 0x0F) + (val2 & 0x0F) + carry_in) > 0x0F,
        c=result > 0xFF,
    )

# @intent:responsibility 8ビット減算の結果に基づいて全フラグを更新します。
def update_flags_sub8(state: Lr35902CpuState, val1: int, val2: int, result: int, borrow_in: int = 0) -> None:
    """SUB/SBC/CP命令のフラグを更新します。resultは符号付きの差（切り詰め前）です。"""
    state.set_flags(
        z=(result & 0xFF) == 0,
        n=True,
        # Half Carry (Borrow): ビット4からのボロー
        h=((val1 & 0x0F) - (val2 & 0x0F) - borrow_in) < 0,
        c=result < 0,
    )

# @intent:responsibility 8ビット論理演算の結果に基づいてフラグを更新します。
def update_flags_logic8(state: Lr35902CpuState, result: int, h_flag: bool = False) -> None:
    """AND/OR/XOR命令のフラグを更新します。"""
    state.set_flags(z=(result & 0xFF) == 0, n=False, h=h_flag, c=False)

# @intent:responsibility インクリメント/デクリメント命令のフラグを更新します（Cフラグは変化しません）。
def update_flags_inc_dec8(state: Lr35902CpuState, val: int, result: int, is_inc: bool) -> None:
    """INC/DEC命令のフラグを更新します。Cフラグは保持されます。"""
    if is_inc:
        half = (val & 0x0F) == 0x0F
    else:
        half = (val & 0x0F) == 0x00
    state.set_flags(z=(result & 0xFF) == 0, n=not is_inc, h=half, c=state.flag_c)

# @intent:responsibility 16ビット加算 (ADD HL,rr) の結果に基づいてフラグを更新します。
# @intent:rationale Zフラグは影響を受けないことに注意してください。
def update_flags_add16(state: Lr35902CpuState, val1: int, val2: int, result: int) -> None:
    """ADD HL,rr命令のフラグを更新します。"""
    state.set_flags(
        z=state.flag_z,
        n=False,
        # Half Carry: ビット11からのキャリー
        h=((val1 & 0x0FFF) + (val2 & 0x0FFF)) > 0x0FFF,
        c=result > 0xFFFF,
    )

# @intent:responsibility SPに符号付き8ビットオフセットを加算し、フラグを更新して結果を返します。
def add_sp_offset(state: Lr35902CpuState, offset: int) -> int:
    """
    ADD SP,r8 / LD HL,SP+r8 の共通処理。
    フラグは下位バイト同士の符号なし加算から求めます。Z, Nは常に0です。
    """
    sp = state.sp
    unsigned = offset & 0xFF
    state.set_flags(
        z=False,
        n=False,
        h=((sp & 0x0F) + (unsigned & 0x0F)) > 0x0F,
        c=((sp & 0xFF) + unsigned) > 0xFF,
    )
    return (sp + offset) & 0xFFFF

# @intent:responsibility CB系のローテート/シフト/SWAP命令を実行し、結果を返します。
# @intent:pre-condition op_indexは0-7 (RLC, RRC, RL, RR, SLA, SRA, SWAP, SRL) である必要があります。
def rotate_shift8(state: Lr35902CpuState, val: int, op_index: int) -> int:
    """
    ローテート/シフト命令の結果を計算し、フラグ（Z, N=0, H=0, C）を更新します。
    """
    carry_in = 1 if state.flag_c else 0
    if op_index == 0:  # RLC
        carry = (val >> 7) & 1
        result = ((val << 1) | carry) & 0xFF
    elif op_index == 1:  # RRC
        carry = val & 1
        result = ((val >> 1) | (carry << 7)) & 0xFF
    elif op_index == 2:  # RL
        carry = (val >> 7) & 1
        result = ((val << 1) | carry_in) & 0xFF
    elif op_index == 3:  # RR
        carry = val & 1
        result = ((val >> 1) | (carry_in << 7)) & 0xFF
    elif op_index == 4:  # SLA
        carry = (val >> 7) & 1
        result = (val << 1) & 0xFF
    elif op_index == 5:  # SRA (ビット7を保持)
        carry = val & 1
        result = (val >> 1) | (val & 0x80)
    elif op_index == 6:  # SWAP
        carry = 0
        result = ((val << 4) | (val >> 4)) & 0xFF
    elif op_index == 7:  # SRL
        carry = val & 1
        result = val >> 1
    else:
        raise ValueError(f"Invalid rotate/shift operation index: {op_index}")

    state.set_flags(z=result == 0, n=False, h=False, c=carry == 1)
    return result

# @intent:responsibility 直前の加減算結果に基づいてAレジスタをBCD補正します。
def decimal_adjust(state: Lr35902CpuState) -> None:
    """DAA命令。Nフラグは保持され、Hは常にクリアされます。"""
    a = state.a
    carry = state.flag_c
    if not state.flag_n:
        if carry or a > 0x99:
            a = (a + 0x60) & 0xFF
            carry = True
        if state.flag_h or (a & 0x0F) > 0x09:
            a = (a + 0x06) & 0xFF
    else:
        if carry:
            a = (a - 0x60) & 0xFF
        if state.flag_h:
            a = (a - 0x06) & 0xFF
    state.a = a
    state.set_flags(z=a == 0, n=state.flag_n, h=False, c=carry)
