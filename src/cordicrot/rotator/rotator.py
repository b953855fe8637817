# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

# A sequential (one micro-rotation per clock) CORDIC, rotation mode.
# Rotates (x, y) by a phase given as a fraction of a full turn.  The
# output carries the CORDIC gain (~1.1644 for 11 stages): correcting
# for it is left to the caller.

from nmigen import Module, Elaboratable, Signal, Mux, signed
from nmigen.cli import rtlil
from enum import Enum, unique

from cordicrot.rotator.angle_table import AngleROM, ANGLES_PW16
from cordicrot.rotator.config import RotatorConfig
from cordicrot.rotator.fold import QuadrantFold
from cordicrot.rotator.round import ConvergentRound


@unique
class RotatorState(Enum):
    IDLE = 0
    BUSY = 1


class CORDICRotator(Elaboratable):
    def __init__(self, config=None, angles=ANGLES_PW16):
        self.config = config = config or RotatorConfig()
        config.check_angles(angles)
        self.angles = tuple(angles)
        self.nstages = config.nstages

        # synchronous reset, abandons any rotation in flight
        self.reset = Signal(reset_less=True)
        # request a rotation.  only looked at while idle
        self.start = Signal(reset_less=True)
        self.x_in = Signal(signed(config.iw), reset_less=True)
        self.y_in = Signal(signed(config.iw), reset_less=True)
        self.phase_in = Signal(config.pw, reset_less=True)

        self.busy = Signal()
        # high for exactly one clock, when x_out/y_out are updated
        self.done = Signal(reset=0)
        self.x_out = Signal(signed(config.ow), reset=0)
        self.y_out = Signal(signed(config.ow), reset=0)

    def elaborate(self, platform):
        m = Module()
        comb = m.d.comb
        sync = m.d.sync
        cfg = self.config

        x = Signal(signed(cfg.ww))
        y = Signal(signed(cfg.ww))
        ph = Signal(cfg.pw)
        nx = Signal(signed(cfg.ww))
        ny = Signal(signed(cfg.ww))
        nph = Signal(cfg.pw)
        dx = Signal(signed(cfg.ww))
        dy = Signal(signed(cfg.ww))
        dph = Signal(cfg.pw)
        i = Signal(range(self.nstages))
        shift = Signal(range(self.nstages+1))
        state = Signal(RotatorState, reset=RotatorState.IDLE)

        m.submodules.fold = fold = QuadrantFold(cfg.iw, cfg.ww, cfg.pw)
        m.submodules.anglerom = anglerom = AngleROM(self.angles, cfg.pw)
        m.submodules.round_x = round_x = ConvergentRound(cfg.ww, cfg.ow)
        m.submodules.round_y = round_y = ConvergentRound(cfg.ww, cfg.ow)

        comb += fold.x_in.eq(self.x_in)
        comb += fold.y_in.eq(self.y_in)
        comb += fold.phase_in.eq(self.phase_in)

        # the rom read is registered: ask for next clock's angle now
        comb += anglerom.addr.eq(Mux(state == RotatorState.BUSY, i+1, 0))

        comb += shift.eq(i + 1)
        comb += dx.eq(y >> shift)
        comb += dy.eq(x >> shift)
        comb += dph.eq(anglerom.data)

        # sign bit of the residual phase picks the direction
        with m.If(ph[-1]):
            comb += nx.eq(x + dx)
            comb += ny.eq(y - dy)
            comb += nph.eq(ph + dph)
        with m.Else():
            comb += nx.eq(x - dx)
            comb += ny.eq(y + dy)
            comb += nph.eq(ph - dph)

        comb += round_x.i.eq(nx)
        comb += round_y.i.eq(ny)

        comb += self.busy.eq(state == RotatorState.BUSY)

        sync += self.done.eq(0)
        with m.If(self.reset):
            sync += state.eq(RotatorState.IDLE)
            sync += i.eq(0)
        with m.Elif(state == RotatorState.IDLE):
            with m.If(self.start):
                sync += x.eq(fold.x_out)
                sync += y.eq(fold.y_out)
                sync += ph.eq(fold.phase_out)
                sync += i.eq(0)
                sync += state.eq(RotatorState.BUSY)
        with m.Else():
            sync += x.eq(nx)
            sync += y.eq(ny)
            sync += ph.eq(nph)
            with m.If(i == self.nstages - 1):
                sync += state.eq(RotatorState.IDLE)
                sync += i.eq(0)
                sync += self.done.eq(1)
                sync += self.x_out.eq(round_x.o)
                sync += self.y_out.eq(round_y.o)
            with m.Else():
                sync += i.eq(i+1)
        return m

    def ports(self):
        return [self.reset, self.start,
                self.x_in, self.y_in, self.phase_in,
                self.busy, self.done,
                self.x_out, self.y_out]


if __name__ == '__main__':
    dut = CORDICRotator(RotatorConfig(verbose=True))
    vl = rtlil.convert(dut, ports=dut.ports())
    with open("rotator.il", "w") as f:
        f.write(vl)
