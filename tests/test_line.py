# tests moorsim MooringLine functionality and results

import pytest

from numpy.testing import assert_allclose

import numpy as np
from moorsim.line import MooringLine
from moorsim.helpers import getLineProps, LineError


chain = getLineProps(10, 'chain', name='chain')
rope  = getLineProps(0, 'rope', name='rope')
bowrope = getLineProps(0, 'bowrope', name='bowrope')


def makeLine(rA, rB, chainLength=0, ropeLength=100, seabed=False, ropeType=rope):
    line = MooringLine('test', chainLength, ropeLength, chainType=chain, ropeType=ropeType, seabed=seabed)
    line.setEndPosition(rA, 0)
    line.setEndPosition(rB, 1)
    line.staticSolve()
    return line


def test_line_props():

    assert_allclose(chain['m'], 0.0225*10**2)
    assert_allclose(chain['w'], 2.25*9.81/100)
    assert_allclose(rope['w'], 0.5*9.81/100)
    assert_allclose([rope['T0'], rope['k'], rope['stretch']], [1500, 300, 1.03])
    assert_allclose(bowrope['stretch'], 1.10)


def test_taut_horizontal():
    '''Stretched line: T = T0 + k*stretch, pulling the ends together.'''

    line = makeLine([0, 0], [102, 0])

    assert line.mode == 'straight'
    assert_allclose(line.stretch, 2)
    assert_allclose(line.T, 1500 + 300*2)
    assert_allclose(line.HF, line.T)
    assert_allclose(line.fB, -line.T)
    assert_allclose(line.fA,  line.T)
    assert_allclose(line.getEndForce(1), line.fB)


def test_taut_inclined():
    '''Only the horizontal part of the tension acts on the boat.'''

    line = makeLine([0, 0], [60, 80])

    assert line.mode == 'straight'
    assert_allclose(line.T, 1500)
    assert_allclose(line.HF, 1500*0.6)


def test_slack():

    line = makeLine([0, 0], [80, 0])

    assert line.mode == 'catenary'
    assert line.stretch == 0
    assert 0 < line.HF < 1500
    assert line.T >= line.HF
    assert line.fB < 0

    # boat on the other side of the fixed point: force flips
    line2 = makeLine([0, 0], [-80, 0])
    assert_allclose(line2.fB, -line.fB)


def test_unit_weight():
    '''Chain only adds weight once the rope alone cannot span the distance.'''

    line = MooringLine('stern', 300, 100, chainType=chain, ropeType=rope)

    assert_allclose(line.getUnitWeight(50), rope['w'])
    assert_allclose(line.getUnitWeight(250), (100*rope['w'] + 150*chain['w'])/250)
    assert_allclose(line.getUnitWeight(1000), (100*rope['w'] + 300*chain['w'])/400)


def test_heavier_chain_raises_tension():

    rA, rB = [0, 0], [300, 150]
    ropeOnly = makeLine(rA, rB, chainLength=0, ropeLength=400)
    withChain = makeLine(rA, rB, chainLength=300, ropeLength=100)

    assert withChain.mode == ropeOnly.mode == 'catenary'
    assert withChain.HF > ropeOnly.HF


def test_max_stretch():

    line = MooringLine('stern', 497, 203, chainType=chain, ropeType=rope)
    assert_allclose(line.getMaxStretch(), 497 + 203*1.03)

    line = MooringLine('bow', 0, 120, ropeType=bowrope)
    assert_allclose(line.getMaxStretch(), 132)


def test_seabed_line():
    '''A stern line lying partly on the seabed has a small, positive tension.'''

    line = makeLine([1150, 0], [600, 195], chainLength=497, ropeLength=203, seabed=True)

    assert line.mode in ['seabed', 'catenary']
    assert np.min(line.getLineCoords()[1]) >= -0.5
    assert 0 < line.HF < 1500
    assert line.fB > 0      # pulls the boat seaward toward the anchor


@pytest.mark.parametrize('seabed', [False, True])
def test_zero_length(seabed):
    '''A line of zero length carries no load and reaches nowhere.'''

    line = MooringLine('test', 0, 0, seabed=seabed)
    line.setEndPosition([1150, 0], 0)
    line.setEndPosition([600, 195], 1)
    line.staticSolve()

    assert line.mode == 'absent'
    assert line.isRigged() == False
    assert line.T == 0 and line.HF == 0
    assert line.getEndForce(0) == 0 and line.getEndForce(1) == 0
    assert line.getMaxStretch() == 0
    assert line.getStretchRatio() == 0
    assert_allclose(line.dist, np.hypot(550, 195))

    Xs, Ys = line.getLineCoords()
    assert_allclose(Xs, [1150, 600])
    assert_allclose(Ys, [0, 195])


def test_errors():

    line = MooringLine('test', 0, 100, ropeType=rope)

    with pytest.raises(LineError):
        line.setEndPosition([0, 0], 2)

    with pytest.raises(LineError):
        line.getEndForce(-1)

    with pytest.raises(LineError):
        MooringLine('test', 100, 0)



if __name__ == '__main__':

    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1)
    for x in [200, 400, 600, 700]:
        line = makeLine([1150, 0], [x, 195], chainLength=497, ropeLength=203, seabed=True)
        line.drawLine2d(ax, label=f"{line.mode}, H={line.HF:.0f} N")
    ax.legend()
    plt.show()
