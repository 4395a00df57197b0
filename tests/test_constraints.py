# tests moorsim position clamp, attitude solve and status classification

import pytest

from numpy.testing import assert_allclose

import numpy as np
from moorsim.constraints import getAllowedOffset, clampPosition, solveAttitude, classifyStatus
from moorsim.constraints import NORMAL, STRESSED, COLLIDING, CRITICAL, SUNK
from moorsim.boat import Boat
from moorsim.environment import Environment
from moorsim.line import MooringLine
from moorsim.helpers import getLineProps


rDock   = np.array([0.0, 200.0])
rAnchor = np.array([1150.0, 0.0])
bowMax  = 132.0
sternMax = 706.09

# candidate positions for the clamp check
candidates = [-500, 0, 100, 249.9, 250, 300, 350, 381, 400, 1000, 5000]


def test_allowed_offset():

    assert_allclose(getAllowedOffset(5, 3), 4)
    assert_allclose(getAllowedOffset(5, -3), 4)
    assert getAllowedOffset(5, 6) == 0
    assert getAllowedOffset(5, 5) == 0


@pytest.mark.parametrize('x', candidates)
def test_clamp_bounds(x):
    '''Clamped positions satisfy both line reaches and the dock face.'''

    xc, info = clampPosition(x, 250, 195, rDock, rAnchor, bowMax, sternMax)

    assert info['feasible']
    assert info['lo'] <= xc <= info['hi']
    assert_allclose(info['lo'], 250)        # dock face
    assert_allclose(info['hi'], 250 + np.sqrt(bowMax**2 - 5**2))

    bowDist = np.hypot(xc - 250 - rDock[0], 195 - rDock[1])
    sternDist = np.hypot(rAnchor[0] - (xc + 250), 195 - rAnchor[1])
    assert bowDist <= bowMax + 1e-9
    assert sternDist <= sternMax + 1e-9
    assert xc - 250 >= rDock[0] - 1e-9

    if info['lo'] <= x <= info['hi']:
        assert xc == x
        assert info['clamped'] == 0
    elif x < info['lo']:
        assert info['clamped'] == -1
    else:
        assert info['clamped'] == 1


def test_clamp_infeasible():
    '''An empty admissible interval snaps to its midpoint.'''

    xc, info = clampPosition(400, 250, 0, rDock, [300, 0], 132, 100)

    assert info['feasible'] == False
    assert info['lo'] > info['hi']
    assert_allclose(xc, 0.5*(info['lo'] + info['hi']))


def test_clamp_unrigged():
    '''A line with no length adds no bound; the dock face still does.'''

    xc, info = clampPosition(5000, 250, 195, rDock, rAnchor, 0, sternMax)
    assert info['feasible']
    assert_allclose(info['lo'], 250)
    assert_allclose(info['hi'], 1150 + np.sqrt(sternMax**2 - 195**2) - 250)
    assert_allclose(xc, info['hi'])

    xc, info = clampPosition(-500, 250, 195, rDock, rAnchor, 0, 0)
    assert info['hi'] == np.inf
    assert_allclose(xc, 250)


def test_attitude_flat():

    env = Environment(waveHeight=0)
    boat = Boat(length=500)
    boat.reset(350, 0)

    att = solveAttitude(boat, env, rDock, rAnchor, bowMax, sternMax)

    assert_allclose([att['bowY'], att['sternY']], [120, 120])
    assert_allclose(boat.y, 120)
    assert_allclose(boat.tilt, 0, atol=1e-12)
    assert_allclose(boat.rBow, [100, 195])


def test_attitude_ground():
    '''The keel rests on the seabed when the water is too shallow.'''

    env = Environment(seabedDepth=20, waterLevel=10, waveHeight=0)
    boat = Boat(length=500)
    boat.reset(350, 0)

    att = solveAttitude(boat, env, rDock, rAnchor, bowMax, sternMax)

    assert_allclose(boat.y, boat.keelOffset)
    assert att['bowY'] > att['bowNat']


def test_attitude_held_down():
    '''A short bow line to a low dock holds the bow under water.'''

    env = Environment(waveHeight=0)
    boat = Boat(length=500)
    boat.reset(300, 0)

    att = solveAttitude(boat, env, [0, 50], rAnchor, 110, sternMax)

    assert_allclose(att['bowY'], 50 + np.sqrt(110**2 - 50**2) - 75)
    assert att['bowY'] < att['bowNat'] - 5
    assert boat.tilt < 0
    assert abs(np.sin(boat.tilt)) <= 0.9


rope = getLineProps(0, 'bowrope')


def makeLines(bowDist=50, sternRatio=0.5):
    bowLine = MooringLine('bow', 0, 100, ropeType=rope)
    sternLine = MooringLine('stern', 0, 100, ropeType=rope)
    bowLine.dist = bowDist
    sternLine.dist = sternRatio*sternLine.getMaxStretch()
    return bowLine, sternLine


calm = dict(bowY=120, sternY=120, bowNat=120, sternNat=120)


def test_status_priority():

    bow, stern = makeLines()
    assert classifyStatus(calm, bow, stern, 100, 5, -1) == NORMAL

    # bow line at its limit with wind from the dock
    bow, stern = makeLines(bowDist=109.6)
    assert classifyStatus(calm, bow, stern, 100, 5, -1) == CRITICAL
    assert classifyStatus(calm, bow, stern, 100, 0, -1) == NORMAL
    assert classifyStatus(calm, bow, stern, 100, 5, 1) == NORMAL
    assert classifyStatus(calm, bow, stern, 0.5, 5, -1) == CRITICAL

    # collision outranks stress
    bow, stern = makeLines(sternRatio=0.99)
    assert classifyStatus(calm, bow, stern, 0.5, 5, 1) == COLLIDING
    assert classifyStatus(calm, bow, stern, 10, 5, 1) == STRESSED
    assert classifyStatus(calm, bow, stern, 10, 5, -1) == NORMAL

    bow, stern = makeLines(bowDist=108)
    assert classifyStatus(calm, bow, stern, 10, 5, -1) == STRESSED

    # sunk outranks everything
    bow, stern = makeLines(bowDist=109.6)
    under = dict(calm, sternY=114)
    assert classifyStatus(under, bow, stern, 0.5, 5, -1) == SUNK
    assert classifyStatus(calm, bow, stern, 100, 5, -1, isSunk=True) == SUNK

    # a bow line that isn't rigged is never at its limit
    bow, stern = makeLines()
    bow = MooringLine('bow', 0, 0)
    bow.dist = 50
    assert classifyStatus(calm, bow, stern, 100, 5, -1) == NORMAL



if __name__ == '__main__':

    for x in candidates:
        print(x, clampPosition(x, 250, 195, rDock, rAnchor, bowMax, sternMax))
