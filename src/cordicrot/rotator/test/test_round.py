# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

from nmigen import Module, Signal
from nmigen.back.pysim import Simulator, Settle
from nmigen.test.utils import FHDLTestCase

from cordicrot.rotator.config import RotatorConfig
from cordicrot.rotator.round import ConvergentRound
from cordicrot.rotator.model import convergent_round
import unittest


class ConvergentRoundTestCase(FHDLTestCase):
    def run_test(self, inputs, cfg):
        m = Module()
        m.submodules.dut = dut = ConvergentRound(cfg.ww, cfg.ow)
        sig_in = Signal.like(dut.i)
        m.d.comb += dut.i.eq(sig_in)

        sim = Simulator(m)

        def process():
            for v in inputs:
                yield sig_in.eq(v)
                yield Settle()
                result = yield dut.o
                expected = convergent_round(v, cfg)
                msg = "{}: {}, expected {}".format(v, result, expected)
                self.assertEqual(result, expected, msg)
        sim.add_process(process)
        sim.run()

    def test_selected(self):
        cfg = RotatorConfig()
        self.run_test([0, 2, 3, 5, 6, 7, 10, -2, -6, -10, 299, 300], cfg)

    def test_saturate(self):
        cfg = RotatorConfig()
        self.run_test([508, 510, 600, 1023, -508, -512, -600, -1024], cfg)
        for v, expected in [(1023, 127), (-1024, -127)]:
            self.assertEqual(convergent_round(v, cfg), expected)

    def test_exhaustive(self):
        cfg = RotatorConfig()
        self.run_test(range(-(1 << (cfg.ww-1)), 1 << (cfg.ww-1)), cfg)

    def test_one_bit_dropped(self):
        cfg = RotatorConfig(iw=8, ow=9, ww=11)
        self.run_test(range(-(1 << (cfg.ww-1)), 1 << (cfg.ww-1)), cfg)

    def test_many_bits_dropped(self):
        cfg = RotatorConfig(iw=8, ow=4, ww=11)
        self.run_test(range(-(1 << (cfg.ww-1)), 1 << (cfg.ww-1)), cfg)


if __name__ == "__main__":
    unittest.main()
