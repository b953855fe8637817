# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

from nmigen import Module, Elaboratable, Signal, Cat, Repl, signed
from nmigen.cli import rtlil


class ConvergentRound(Elaboratable):
    """ rounds a ``ww``-bit working value to ``ow`` bits, half to even.

    the guard bit at the top of the working value only exists to absorb
    the CORDIC gain, it is dropped along with the low bits so the result
    is at the same scale as the rotator's input.  results beyond the
    output range (|input| * gain above 2**(ow-1) - 1) saturate to
    +/-(2**(ow-1) - 1).
    """
    def __init__(self, ww, ow):
        assert ww >= ow + 2
        self.ww = ww
        self.ow = ow

        self.i = Signal(signed(ww), reset_less=True)
        self.o = Signal(signed(ow), reset_less=True)

    def elaborate(self, platform):
        m = Module()
        comb = m.d.comb

        drop = self.ww - self.ow - 1
        lsb = self.i[drop]

        # half an LSB when the retained LSB is odd, a hair under half
        # when it is even: exact ties go to the even neighbour
        fixup = Signal(drop, reset_less=True)
        if drop == 1:
            comb += fixup.eq(lsb)
        else:
            comb += fixup.eq(Cat(Repl(~lsb, drop-1), lsb))

        # one bit wider than the input, adding the fixup can not wrap
        rounded = Signal(signed(self.ww+1), reset_less=True)
        comb += rounded.eq(self.i + fixup)
        q = Signal(signed(self.ow+2), reset_less=True)
        comb += q.eq(rounded[drop:])

        # saturate symmetrically rather than wrap past the output range
        limit = (1 << (self.ow-1)) - 1
        with m.If(q > limit):
            comb += self.o.eq(limit)
        with m.Elif(q < -limit):
            comb += self.o.eq(-limit)
        with m.Else():
            comb += self.o.eq(q)

        return m

    def ports(self):
        return [self.i, self.o]


if __name__ == '__main__':
    dut = ConvergentRound(11, 8)
    vl = rtlil.convert(dut, ports=dut.ports())
    with open("round.il", "w") as f:
        f.write(vl)
