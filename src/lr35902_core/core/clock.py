# lr35902_core/core/clock.py
"""
累積クロックカウンタ。

命令ごとのマシンサイクル(M)とクロックティック(T)を積算し、
周辺デバイスとの同期を取る外部コンポーネントに提供します。
"""
from dataclasses import dataclass

# @intent:responsibility 電源投入またはリセット以降に消費された総サイクル数を保持します。
@dataclass
class Clock:
    m: int = 0  # Machine cycles
    t: int = 0  # Clock ticks

    def advance(self, m: int, t: int) -> None:
        self.m += m
        self.t += t

    def reset(self) -> None:
        self.m = 0
        self.t = 0
