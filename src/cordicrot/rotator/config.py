# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

from cordicrot.rotator.angle_table import cordic_gain
import math


class RotatorConfig:
    """ Configuration for the sequential CORDIC rotator.

    :attribute iw: input width of x and y (signed)
    :attribute ow: output width of x and y (signed)
    :attribute pw: phase width.  a phase of ``v`` is ``v / 2**pw`` of a
        full turn.
    :attribute ww: working width of the internal x and y registers.  one
        bit of sign growth on the left, ``ww-iw-1`` guard bits on the right.
    :attribute nstages: number of micro-rotations (ticks) per vector
    """

    def __init__(self, iw=8, ow=8, pw=16, ww=11, nstages=11, verbose=False):
        """ Create a ``RotatorConfig`` instance. """
        if pw < 3:
            raise ValueError("phase width must cover the octant bits")
        if ww < iw + 1:
            raise ValueError("working width has no room for sign growth")
        if ww < ow + 2:
            raise ValueError("working width too narrow to round to ow bits")
        if nstages < 1:
            raise ValueError("need at least one stage")
        self.iw = iw
        self.ow = ow
        self.pw = pw
        self.ww = ww
        self.nstages = nstages
        self.check_headroom()
        if verbose:
            print(f"{self}: xtra={self.xtra} gain={self.gain:.6f}")

    def __repr__(self):
        return f"RotatorConfig({self.iw}, {self.ow}, {self.pw}, " \
            + f"{self.ww}, {self.nstages})"

    @property
    def xtra(self):
        """ extra bits of the working registers over the input """
        return self.ww - self.iw

    @property
    def frac_bits(self):
        """ zero bits appended on the right when widening the input """
        return self.ww - self.iw - 1

    @property
    def drop_bits(self):
        """ low bits discarded by the output rounding stage """
        return self.ww - self.ow - 1

    @property
    def gain(self):
        """ magnitude growth of the rotator, never corrected internally """
        return cordic_gain(self.nstages)

    def check_headroom(self):
        """ check the working registers can not overflow.

        the largest folded vector is a full-scale corner,
        ``2**(iw-1) * sqrt(2)``, widened by ``frac_bits``.  every stage
        grows it by ``sqrt(1 + 2**(-2k))``: the final magnitude must still
        be representable in ``ww`` bits.
        """
        corner = (1 << (self.iw - 1 + self.frac_bits)) * math.sqrt(2)
        if corner * self.gain >= (1 << (self.ww - 1)):
            raise ValueError(f"{self}: working width overflows, "
                             f"increase ww")

    def check_angles(self, angles):
        """ check a supplied angle table suits this configuration """
        if len(angles) < self.nstages:
            raise ValueError(f"angle table has {len(angles)} entries, "
                             f"need {self.nstages}")
        for a in angles:
            if a < 0 or a >= (1 << self.pw):
                raise ValueError(f"angle {a:#x} does not fit {self.pw} bits")
        for a, b in zip(angles, angles[1:]):
            if b > a:
                raise ValueError("angle table must be non-increasing")
