# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information
""" Angle table for the sequential CORDIC rotator.

The table entries are phase increments in units of 2^-PW of a full turn.
Entry ``n`` approximates ``atan(2**-(n+1))``: the first stage of the
rotator shifts by one, since the quadrant folder has already taken care
of everything outside of +/-45 degrees.

The constants are produced offline and are only ever read here.
"""

from nmigen import Elaboratable, Module, Signal, Memory
import math


# PW=16.  11 entries are used by an 11-stage rotator, the rest pad the
# ROM out to a power of two.
ANGLES_PW16 = (
    0x12e4,  # 26.565051 deg
    0x09fb,  # 14.036243 deg
    0x0511,  #  7.125016 deg
    0x028b,  #  3.576334 deg
    0x0146,  #  1.789911 deg
    0x00a3,  #  0.895174 deg
    0x0051,  #  0.447614 deg
    0x0029,  #  0.223811 deg
    0x0014,  #  0.111906 deg
    0x000a,  #  0.055953 deg
    0x0005,  #  0.027976 deg
    0x0003,  #  0.013988 deg
    0x0001,  #  0.006994 deg
    0x0001,  #  0.003497 deg
    0x0000,  #  0.001749 deg
    0x0000,  #  0.000874 deg
)


def cordic_gain(nstages):
    """ magnitude growth of ``nstages`` micro-rotations, shifts 1..nstages.

    the rotator never corrects for this: callers scale externally.
    """
    gain = 1.0
    for i in range(1, nstages+1):
        gain *= math.sqrt(1 + 2**(-2*i))
    return gain


def residual_bound(angles, nstages, pw):
    """ worst-case residual phase after ``nstages`` micro-rotations,
    starting from anywhere inside the folded +/-45 degree range.
    """
    bound = 1 << (pw-3)
    for a in angles[:nstages]:
        bound = max(bound - a, a)
    return bound


class AngleROM(Elaboratable):
    """ the angle table as a ROM, one clock of read latency """
    def __init__(self, angles, pw):
        self.angles = tuple(angles)
        self.pw = pw

        self.addr = Signal(range(len(self.angles)))
        self.data = Signal(pw)

        self.mem = Memory(width=pw,
                          depth=len(self.angles),
                          init=self.angles)

    def elaborate(self, platform):
        m = Module()
        m.submodules.rdport = rdport = self.mem.read_port()
        m.d.comb += rdport.addr.eq(self.addr)
        m.d.comb += self.data.eq(rdport.data)
        return m
