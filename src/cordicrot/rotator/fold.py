# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

from nmigen import Module, Elaboratable, Signal, signed
from nmigen.cli import rtlil


class QuadrantFold(Elaboratable):
    """ pre-rotates the input by a multiple of 90 degrees so that the
    remaining phase lies within +/-45 degrees.

    the top three bits of the phase select the octant.  octants 0 and 7
    pass through, 1 and 2 rotate by +90, 3 and 4 by 180, 5 and 6 by +270.
    x and y are widened to ``ww`` bits on the way through.
    """
    def __init__(self, iw, ww, pw):
        assert ww > iw
        self.iw = iw
        self.ww = ww
        self.pw = pw

        self.x_in = Signal(signed(iw), reset_less=True)
        self.y_in = Signal(signed(iw), reset_less=True)
        self.phase_in = Signal(pw, reset_less=True)

        self.x_out = Signal(signed(ww), reset_less=True)
        self.y_out = Signal(signed(ww), reset_less=True)
        self.phase_out = Signal(pw, reset_less=True)

    def elaborate(self, platform):
        m = Module()
        comb = m.d.comb

        fracbits = self.ww - self.iw - 1
        quarter = 1 << (self.pw - 2)

        # sign extend, zero fill the guard bits
        ex = Signal(signed(self.ww), reset_less=True)
        ey = Signal(signed(self.ww), reset_less=True)
        comb += ex.eq(self.x_in << fracbits)
        comb += ey.eq(self.y_in << fracbits)

        octant = self.phase_in[-3:]
        with m.Switch(octant):
            with m.Case(0b001, 0b010):
                comb += self.x_out.eq(-ey)
                comb += self.y_out.eq(ex)
                comb += self.phase_out.eq(self.phase_in - quarter)
            with m.Case(0b011, 0b100):
                comb += self.x_out.eq(-ex)
                comb += self.y_out.eq(-ey)
                comb += self.phase_out.eq(self.phase_in - 2*quarter)
            with m.Case(0b101, 0b110):
                comb += self.x_out.eq(ey)
                comb += self.y_out.eq(-ex)
                comb += self.phase_out.eq(self.phase_in - 3*quarter)
            with m.Default():
                comb += self.x_out.eq(ex)
                comb += self.y_out.eq(ey)
                comb += self.phase_out.eq(self.phase_in)

        return m

    def ports(self):
        return [self.x_in, self.y_in, self.phase_in,
                self.x_out, self.y_out, self.phase_out]


if __name__ == '__main__':
    dut = QuadrantFold(8, 11, 16)
    vl = rtlil.convert(dut, ports=dut.ports())
    with open("fold.il", "w") as f:
        f.write(vl)
