# tests/core/test_cpu.py
"""
lr35902_core.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List, Tuple

from lr35902_core.core.state import CpuState
from lr35902_core.core.clock import Clock
from lr35902_core.core.cpu import AbstractCpu
from lr35902_core.core.snapshot import Snapshot, Operation
from lr35902_core.transport.bus import MemoryBus, BusAccessType

# @intent:test_suite CPUの状態管理と抽象CPUの基本的な動作を検証します。

class StubCpu(AbstractCpu):
    """
    命令を1種類だけ持つテスト用CPU。全てのオペコードで0x0020に0xFFを書き込み、2サイクルを消費します。
    """
    def __init__(self, bus: MemoryBus, initial_pc: int = 0x0000, initial_sp: int = 0x0000):
        self._initial_pc = initial_pc
        self._initial_sp = initial_sp
        super().__init__(bus)

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=self._initial_pc, sp=self._initial_sp)

    def _decode(self, opcode: int, pc: int) -> Operation:
        if opcode == 0x00:
            return Operation(opcode_hex=f"{opcode:02X}", mnemonic="NOP")
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic="STORE", operands=["($0020)", "$FF"])

    def _execute(self, opcode: int) -> None:
        self._bus.write_byte(0x0020, 0xFF)

    def _last_cycles(self) -> Tuple[int, int]:
        return 2, 8

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_flag_state(self) -> Dict[str, bool]:
        return {"Z": False}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return [(start_addr + i, "00", "NOP") for i in range(length)]

class TestCpuState:
    """
    CpuStateの単体テスト。
    """
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0x0000
        assert state.sp == 0x0000

    def test_cpu_state_reset(self):
        state = CpuState(pc=0x1234, sp=0xABCD)
        state.reset()
        assert state == CpuState()

    def test_cpu_state_restore(self):
        state = CpuState(pc=0x1234, sp=0xABCD)
        state.restore(CpuState(pc=0x0100, sp=0xFFFE))
        assert state == CpuState(pc=0x0100, sp=0xFFFE)

class TestClock:
    def test_advance_accumulates(self):
        clock = Clock()
        clock.advance(1, 4)
        clock.advance(3, 12)
        assert (clock.m, clock.t) == (4, 16)

    def test_reset(self):
        clock = Clock(m=10, t=40)
        clock.reset()
        assert clock == Clock()

class TestAbstractCpu:
    """
    AbstractCpuの抽象メソッドと具象メソッドのテスト。
    """
    @pytest.fixture
    def setup_cpu(self):
        bus = MemoryBus(256)
        cpu = StubCpu(bus, initial_pc=0x0010, initial_sp=0x00F0)
        return cpu, bus

    def test_abstract_cpu_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            AbstractCpu(MemoryBus())

    def test_abstract_cpu_init(self, setup_cpu):
        cpu, bus = setup_cpu
        state = cpu.get_state()
        assert state.pc == 0x0010
        assert state.sp == 0x00F0
        assert cpu.get_bus() is bus
        assert cpu.get_clock() == Clock()

    # @intent:test_case_reset リセットで全レジスタと累積クロックがゼロに戻り、状態オブジェクトは同一のままであることを検証します。
    def test_abstract_cpu_reset(self, setup_cpu):
        cpu, _ = setup_cpu
        state = cpu.get_state()
        cpu.step()
        cpu.reset()
        assert cpu.get_state() is state
        assert state.pc == 0x0000
        assert state.sp == 0x0000
        assert cpu.get_clock() == Clock()

    def test_abstract_cpu_step(self, setup_cpu):
        cpu, bus = setup_cpu
        initial_pc = cpu.get_state().pc
        bus.write_byte(initial_pc, 0x12)
        bus.write_byte(0x0000, 0x77) # 前サイクルの残存ログ

        snapshot = cpu.step()

        assert cpu.get_state().pc == initial_pc + 1
        assert isinstance(snapshot, Snapshot)
        assert snapshot.state == cpu.get_state()
        assert snapshot.operation.mnemonic == "STORE"
        assert snapshot.metadata.m_cycles == 2
        assert snapshot.metadata.t_cycles == 8
        assert snapshot.metadata.symbol_info == "STORE ($0020),$FF"

        assert [(a.address, a.data, a.access_type) for a in snapshot.bus_activity] == [
            (initial_pc, 0x12, BusAccessType.READ),
            (0x0020, 0xFF, BusAccessType.WRITE),
        ]

    # @intent:test_case_snapshot スナップショットの状態は後続の命令で書き換わらないことを検証します。
    def test_snapshot_state_is_a_copy(self, setup_cpu):
        cpu, _ = setup_cpu
        first = cpu.step()
        second = cpu.step()
        assert first.state.pc == 0x0011
        assert second.state.pc == 0x0012
        assert first.state is not cpu.get_state()
        assert second.metadata.m_cycles == 4
        assert second.metadata.t_cycles == 16

    def test_step_propagates_out_of_range_fetch(self):
        bus = MemoryBus(16)
        cpu = StubCpu(bus, initial_pc=0x0010)
        with pytest.raises(IndexError):
            cpu.step()
        assert cpu.get_clock() == Clock()

    # @intent:test_case_oob 実行中に範囲外アクセスで中断した場合、PCはフェッチ前の位置に戻ることを検証します。
    def test_step_restores_pc_when_execution_fails(self):
        bus = MemoryBus(16) # StubCpuの書き込み先 0x0020 は範囲外
        cpu = StubCpu(bus, initial_pc=0x0004)
        with pytest.raises(IndexError):
            cpu.step()
        assert cpu.get_state().pc == 0x0004
        assert cpu.get_clock() == Clock()
