# SPDX-License-Identifier: LGPL-2.1-or-later
# See Notices.txt for copyright information

""" Bit-exact software model of the sequential CORDIC rotator.

code for simulating/testing the hardware: every value is wrapped to the
same widths the registers have, so results match the gateware exactly.
"""

from nmigen.hdl.ast import Const
from collections import namedtuple

from cordicrot.rotator.rotator import RotatorState


def fold(x, y, phase, config):
    """ reduce (x, y, phase) to a working vector and a phase within
    +/-45 degrees.

    :returns: (x, y, phase) with x/y widened to ``config.ww`` bits
    """
    iw, ww, pw = config.iw, config.ww, config.pw
    x = Const.normalize(x, (iw, True)) << config.frac_bits
    y = Const.normalize(y, (iw, True)) << config.frac_bits
    phase = Const.normalize(phase, (pw, False))
    quarter = 1 << (pw - 2)
    octant = phase >> (pw - 3)
    if octant in (1, 2):
        x, y, phase = -y, x, phase - quarter
    elif octant in (3, 4):
        x, y, phase = -x, -y, phase - 2*quarter
    elif octant in (5, 6):
        x, y, phase = y, -x, phase - 3*quarter
    return (Const.normalize(x, (ww, True)),
            Const.normalize(y, (ww, True)),
            Const.normalize(phase, (pw, False)))


def micro_rotate(x, y, ph, stage, angle, config):
    """ one CORDIC iteration, rotating towards zero residual phase """
    shift = stage + 1
    dx = y >> shift
    dy = x >> shift
    if ph >> (config.pw - 1):
        x, y, ph = x + dx, y - dy, ph + angle
    else:
        x, y, ph = x - dx, y + dy, ph - angle
    return (Const.normalize(x, (config.ww, True)),
            Const.normalize(y, (config.ww, True)),
            Const.normalize(ph, (config.pw, False)))


def convergent_round(value, config):
    """ round a working value to ``config.ow`` bits, ties to even.

    out of range results saturate to +/-(2**(ow-1) - 1)
    """
    drop = config.drop_bits
    lsb = (value >> drop) & 1
    fixup = (lsb << (drop - 1)) | ((1 - lsb) * ((1 << (drop - 1)) - 1))
    limit = (1 << (config.ow - 1)) - 1
    return max(-limit, min(limit, (value + fixup) >> drop))


class SeqRotator:
    """ one rotation, calculated one stage at a time.

    :attribute x: working x
    :attribute y: working y
    :attribute phase: residual phase (unsigned, ``config.pw`` bits)
    :attribute stage: index of the next stage to run
    """

    def __init__(self, x, y, phase, config, angles):
        config.check_angles(angles)
        self.config = config
        self.angles = angles
        self.x, self.y, self.phase = fold(x, y, phase, config)
        self.stage = 0

    @property
    def residual(self):
        """ residual phase, as a signed count of phase units """
        return Const.normalize(self.phase, (self.config.pw, True))

    def calculate_stage(self):
        """ Calculate the next micro-rotation.

        :returns bool: True if this was the last stage.
        """
        if self.stage == self.config.nstages:
            return True
        self.x, self.y, self.phase = micro_rotate(
            self.x, self.y, self.phase, self.stage,
            self.angles[self.stage], self.config)
        self.stage += 1
        return self.stage == self.config.nstages

    def calculate(self):
        """ Calculate the rotated vector.

        :returns: self
        """
        while not self.calculate_stage():
            pass
        return self

    @property
    def result(self):
        """ the rounded (x, y) output """
        return (convergent_round(self.x, self.config),
                convergent_round(self.y, self.config))


def run_rotator(x, y, phase, config, angles, log=True):
    """ rotate one vector, printing every stage when ``log`` is set """
    rot = SeqRotator(x, y, phase, config, angles)
    if log:
        print("folded x: {}, y: {}, ph: {:#x}".format(rot.x, rot.y,
                                                      rot.phase))
    while rot.stage < config.nstages:
        rot.calculate_stage()
        if log:
            print("iteration {}".format(rot.stage - 1))
            print("x: {}, y: {}, ph: {}".format(rot.x, rot.y, rot.residual))
    return rot.result


ModelState = namedtuple("ModelState", ["status", "stage", "x", "y", "ph",
                                       "done", "x_out", "y_out"])

RESET_STATE = ModelState(RotatorState.IDLE, 0, 0, 0, 0, False, 0, 0)


def next_state(config, angles, state, reset, start, x, y, phase):
    """ advance the rotator by one clock tick.

    the inputs are those presented before the tick.  returns a new
    ``ModelState``, the old one is left untouched.
    """
    if reset:
        return state._replace(status=RotatorState.IDLE, stage=0, done=False)
    if state.status == RotatorState.IDLE:
        if not start:
            return state._replace(done=False)
        fx, fy, fph = fold(x, y, phase, config)
        return state._replace(status=RotatorState.BUSY, stage=0,
                              x=fx, y=fy, ph=fph, done=False)

    nx, ny, nph = micro_rotate(state.x, state.y, state.ph, state.stage,
                               angles[state.stage], config)
    if state.stage == config.nstages - 1:
        return state._replace(status=RotatorState.IDLE, stage=0,
                              x=nx, y=ny, ph=nph, done=True,
                              x_out=convergent_round(nx, config),
                              y_out=convergent_round(ny, config))
    return state._replace(stage=state.stage + 1, x=nx, y=ny, ph=nph,
                          done=False)


class RotatorModel:
    """ tick-by-tick model of ``CORDICRotator``, same busy/done timing """

    def __init__(self, config, angles):
        config.check_angles(angles)
        self.config = config
        self.angles = angles
        self.state = RESET_STATE

    @property
    def busy(self):
        return self.state.status == RotatorState.BUSY

    @property
    def done(self):
        return self.state.done

    @property
    def x_out(self):
        return self.state.x_out

    @property
    def y_out(self):
        return self.state.y_out

    def tick(self, reset=False, start=False, x=0, y=0, phase=0):
        self.state = next_state(self.config, self.angles, self.state,
                                reset, start, x, y, phase)
        return self.state
