"""
LR35902 命令マッピング定義。
各命令モジュールから関数をインポートし、オペコードと関数・ニーモニックの対応表を構築します。

ニーモニック中のプレースホルダーはインラインオペランドを表します:
d8/a8/r8 は1バイト、d16/a16 は2バイト（上位バイトが先）。
"""
from .alu import (
    ALU_OP_NAMES,
    execute_alu_r, execute_alu_n, execute_inc_dec8, execute_inc_dec16, execute_add_hl_rr,
    execute_add_sp_e, execute_rotate_a, execute_daa, execute_cpl, execute_scf, execute_ccf
)
from .load import (
    execute_ld_r_r_prime, execute_ld_r_n, execute_ld_rr_nn, execute_ld_indirect_a,
    execute_ld_nn_sp, execute_ld_a_nn, execute_ld_nn_a, execute_ldh, execute_ld_c,
    execute_ld_hl_sp_e, execute_ld_sp_hl, execute_push_pop
)
from .control import (
    execute_nop, execute_halt, execute_stop, execute_di, execute_ei,
    execute_jp_nn, execute_jp_cc_nn, execute_jp_hl, execute_jr_e, execute_jr_cc_e,
    execute_call_nn, execute_call_cc_nn, execute_ret, execute_ret_cc, execute_reti,
    execute_rst, execute_cb
)
from .bits import SHIFT_OP_NAMES, execute_rotate_shift, execute_bit, execute_res_set

R = ["B", "C", "D", "E", "H", "L", "(HL)", "A"]
RR = ["BC", "DE", "HL", "SP"]
PP = ["BC", "DE", "HL", "AF"]
CC = ["NZ", "Z", "NC", "C"]

# @intent:constant LR35902に存在しないオペコード。ディスパッチャはこれらを未定義命令として扱います。
UNDEFINED_OPCODES = frozenset([0xD3, 0xDB, 0xDD, 0xE3, 0xE4, 0xEB, 0xEC, 0xED, 0xF4, 0xFC, 0xFD])

EXECUTE_MAP = {
    0x00: execute_nop,
    0x08: execute_ld_nn_sp,
    0x10: execute_stop,
    0x18: execute_jr_e,
    0x27: execute_daa,
    0x2F: execute_cpl,
    0x37: execute_scf,
    0x3F: execute_ccf,
    0x76: execute_halt,
    0xC3: execute_jp_nn,
    0xC9: execute_ret,
    0xCB: execute_cb,
    0xCD: execute_call_nn,
    0xD9: execute_reti,
    0xE0: execute_ldh,
    0xF0: execute_ldh,
    0xE2: execute_ld_c,
    0xF2: execute_ld_c,
    0xE8: execute_add_sp_e,
    0xE9: execute_jp_hl,
    0xEA: execute_ld_nn_a,
    0xFA: execute_ld_a_nn,
    0xF3: execute_di,
    0xFB: execute_ei,
    0xF8: execute_ld_hl_sp_e,
    0xF9: execute_ld_sp_hl,
    **{op: execute_ld_rr_nn for op in range(0x01, 0x40, 0x10)}, # LD rr,d16
    **{op: execute_ld_indirect_a for op in range(0x02, 0x40, 0x10)}, # LD (rr),A
    **{op: execute_ld_indirect_a for op in range(0x0A, 0x40, 0x10)}, # LD A,(rr)
    **{op: execute_inc_dec16 for op in range(0x03, 0x40, 0x10)}, # INC rr
    **{op: execute_inc_dec16 for op in range(0x0B, 0x40, 0x10)}, # DEC rr
    **{op: execute_add_hl_rr for op in range(0x09, 0x40, 0x10)}, # ADD HL,rr
    **{op: execute_inc_dec8 for op in range(0x04, 0x40, 0x08)}, # INC r
    **{op: execute_inc_dec8 for op in range(0x05, 0x40, 0x08)}, # DEC r
    **{op: execute_ld_r_n for op in range(0x06, 0x40, 0x08)}, # LD r,d8
    **{op: execute_rotate_a for op in range(0x07, 0x20, 0x08)}, # RLCA, RRCA, RLA, RRA
    **{op: execute_jr_cc_e for op in range(0x20, 0x40, 0x08)}, # JR cc,r8
    **{op: execute_ld_r_r_prime for op in range(0x40, 0x80) if op != 0x76},
    **{op: execute_alu_r for op in range(0x80, 0xC0)}, # ADD/ADC/SUB/SBC/AND/XOR/OR/CP r
    **{op: execute_ret_cc for op in range(0xC0, 0xE0, 0x08)}, # RET cc
    **{op: execute_push_pop for op in range(0xC1, 0x100, 0x10)}, # POP rr
    **{op: execute_jp_cc_nn for op in range(0xC2, 0xE0, 0x08)}, # JP cc,a16
    **{op: execute_call_cc_nn for op in range(0xC4, 0xE0, 0x08)}, # CALL cc,a16
    **{op: execute_push_pop for op in range(0xC5, 0x100, 0x10)}, # PUSH rr
    **{op: execute_alu_n for op in range(0xC6, 0x100, 0x08)}, # ALU A,d8
    **{op: execute_rst for op in range(0xC7, 0x100, 0x08)}, # RST n
}

CB_EXECUTE_MAP = {
    **{op: execute_rotate_shift for op in range(0x00, 0x40)},
    **{op: execute_bit for op in range(0x40, 0x80)},
    **{op: execute_res_set for op in range(0x80, 0x100)},
}

MNEMONIC_MAP = {
    0x00: "NOP",
    0x08: "LD (a16),SP",
    0x10: "STOP d8",
    0x18: "JR r8",
    0x02: "LD (BC),A", 0x12: "LD (DE),A", 0x22: "LD (HL+),A", 0x32: "LD (HL-),A",
    0x0A: "LD A,(BC)", 0x1A: "LD A,(DE)", 0x2A: "LD A,(HL+)", 0x3A: "LD A,(HL-)",
    0x07: "RLCA", 0x0F: "RRCA", 0x17: "RLA", 0x1F: "RRA",
    0x27: "DAA", 0x2F: "CPL", 0x37: "SCF", 0x3F: "CCF",
    0x76: "HALT",
    0xC3: "JP a16",
    0xC9: "RET",
    0xCB: "PREFIX CB",
    0xCD: "CALL a16",
    0xD9: "RETI",
    0xE0: "LDH (a8),A", 0xF0: "LDH A,(a8)",
    0xE2: "LD (C),A", 0xF2: "LD A,(C)",
    0xE8: "ADD SP,r8",
    0xE9: "JP HL",
    0xEA: "LD (a16),A", 0xFA: "LD A,(a16)",
    0xF3: "DI", 0xFB: "EI",
    0xF8: "LD HL,SP+r8",
    0xF9: "LD SP,HL",
    **{0x01 | (i << 4): f"LD {RR[i]},d16" for i in range(4)},
    **{0x03 | (i << 4): f"INC {RR[i]}" for i in range(4)},
    **{0x09 | (i << 4): f"ADD HL,{RR[i]}" for i in range(4)},
    **{0x0B | (i << 4): f"DEC {RR[i]}" for i in range(4)},
    **{0x04 | (i << 3): f"INC {R[i]}" for i in range(8)},
    **{0x05 | (i << 3): f"DEC {R[i]}" for i in range(8)},
    **{0x06 | (i << 3): f"LD {R[i]},d8" for i in range(8)},
    **{0x20 | (i << 3): f"JR {CC[i]},r8" for i in range(4)},
    **{op: f"LD {R[(op >> 3) & 7]},{R[op & 7]}" for op in range(0x40, 0x80) if op != 0x76},
    **{op: f"{ALU_OP_NAMES[(op >> 3) & 7]}{R[op & 7]}" for op in range(0x80, 0xC0)},
    **{0xC0 | (i << 3): f"RET {CC[i]}" for i in range(4)},
    **{0xC2 | (i << 3): f"JP {CC[i]},a16" for i in range(4)},
    **{0xC4 | (i << 3): f"CALL {CC[i]},a16" for i in range(4)},
    **{0xC1 | (i << 4): f"POP {PP[i]}" for i in range(4)},
    **{0xC5 | (i << 4): f"PUSH {PP[i]}" for i in range(4)},
    **{0xC6 | (i << 3): f"{ALU_OP_NAMES[i]}d8" for i in range(8)},
    **{0xC7 | (i << 3): f"RST {i * 8:02X}H" for i in range(8)},
}

CB_MNEMONIC_MAP = {
    **{op: f"{SHIFT_OP_NAMES[op >> 3]} {R[op & 7]}" for op in range(0x00, 0x40)},
    **{op: f"BIT {(op >> 3) & 7},{R[op & 7]}" for op in range(0x40, 0x80)},
    **{op: f"RES {(op >> 3) & 7},{R[op & 7]}" for op in range(0x80, 0xC0)},
    **{op: f"SET {(op >> 3) & 7},{R[op & 7]}" for op in range(0xC0, 0x100)},
}
