# lr35902_core/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Tuple
import logging

from lr35902_core.transport.bus import MemoryBus
from lr35902_core.core.clock import Clock
from lr35902_core.core.snapshot import Snapshot, Operation, Metadata
from lr35902_core.core.state import CpuState

logger = logging.getLogger(__name__)

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    CPUエミュレーションの基底となる抽象クラス。
    メモリバスとの接続、状態管理、累積クロック、命令サイクルの流れを提供します。
    """
    # @intent:responsibility CPUの状態、バスへの参照、累積クロックを初期化します。
    # @intent:pre-condition `bus`は有効なMemoryBusオブジェクトである必要があります。
    def __init__(self, bus: MemoryBus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._clock = Clock()
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        具体的なCPUアーキテクチャはこのメソッドを実装し、
        そのアーキテクチャに特化したCpuStateのサブクラスを返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    # @intent:rationale 状態オブジェクトは作り直さずにその場でゼロ化する。外部が保持している参照を無効にしないため。
    def reset(self) -> None:
        """
        全レジスタ、PC、SP、直前サイクル数、累積クロックをゼロに戻します。
        """
        self._state.reset()
        self._clock.reset()
        logger.info("CPU reset")

    # @intent:responsibility 現在のCPUの状態を返します。
    def get_state(self) -> CpuState:
        return self._state

    def get_bus(self) -> MemoryBus:
        return self._bus

    def get_clock(self) -> Clock:
        return self._clock

    # @intent:responsibility PCが指すオペコードを読み込み、PCをオペコードの直後に進めます。
    def _fetch(self) -> int:
        opcode = self._bus.read_byte(self._state.pc)
        self._state.pc = (self._state.pc + 1) & 0xFFFF
        return opcode

    # @intent:responsibility オペコードを解析し、Operationオブジェクトに変換します。
    # @intent:pre-condition `pc`はオペコード自身のアドレスです。
    @abstractmethod
    def _decode(self, opcode: int, pc: int) -> Operation:
        pass

    # @intent:responsibility オペコードに対応する命令を実行し、CPUの状態を更新します。
    @abstractmethod
    def _execute(self, opcode: int) -> None:
        pass

    # @intent:responsibility 直前の命令が消費したサイクル数 (M, T) を返します。
    @abstractmethod
    def _last_cycles(self) -> Tuple[int, int]:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→フェッチ→デコード→実行→クロック加算→Snapshot生成）を定義します。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点でのCPUとバスの状態を含むSnapshotオブジェクトを返します。
        命令の途中で中断されることはありません。
        """
        # 1. 前処理: 前サイクルまでの残存ログを破棄
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. フェッチ (PCはオペコードの直後へ)
        opcode = self._fetch()

        try:
            # 3. デコード (トレース用、バスログを汚さない)
            operation = self._decode(opcode, initial_pc)

            # 4. 実行 (オペランドの読み込みとPCの更新は命令自身が行う)
            self._execute(opcode)
        except IndexError:
            # 範囲外アクセスで中断した命令はフェッチ前の位置に戻す
            self._state.pc = initial_pc
            raise

        # 5. 後処理 & Snapshot生成
        m, t = self._last_cycles()
        self._clock.advance(m, t)
        snapshot = self._create_snapshot(operation)
        logger.debug("%04X: %s (m=%d t=%d)", initial_pc, snapshot.metadata.symbol_info, m, t)
        return snapshot

    # @intent:responsibility スナップショットを生成します。
    # @intent:rationale 状態は実行後にコピーする。Snapshotが後続の命令で書き換わらないようにするため。
    def _create_snapshot(self, operation: Operation) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        return Snapshot(
            state=replace(self._state),
            operation=operation,
            metadata=Metadata(
                m_cycles=self._clock.m,
                t_cycles=self._clock.t,
                symbol_info=operation.text,
            ),
            bus_activity=bus_activity,
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        トレース出力がCPUの内部構造を知らなくても値を表示できるようにするために使用される。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        """
        現在のフラグの各ビットの状態を辞書形式で返す。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
