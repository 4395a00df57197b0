# tests moorsim Boat dynamics

import pytest

from numpy.testing import assert_allclose

import numpy as np
from moorsim.boat import Boat


dt = 1/60


def test_mass():

    assert_allclose(Boat(length=500).getMass(), 1600)
    assert_allclose(Boat(length=300).getMass(), 800)
    assert_allclose(Boat(length=50).getMass(), 50)      # floored so the mass stays positive


def test_geometry():

    boat = Boat(length=400)
    assert_allclose([boat.halfL, boat.height, boat.deckOffset, boat.keelOffset], [200, 120, 60, 60])


def test_wind_direction():
    '''Wind from the sea pushes toward the dock (-x), wind from the dock pushes seaward.'''

    boat = Boat()
    assert boat.getWindForce(10, 1) < 0
    assert boat.getWindForce(10, -1) > 0
    assert_allclose(boat.getWindForce(10, 1), -boat.getWindForce(10, -1))
    assert_allclose(boat.getWindForce(20, 1), 4*boat.getWindForce(10, 1))
    assert boat.getWindForce(0, 1) == 0


def test_water_drag():

    boat = Boat()
    boat.v = 1.0
    assert boat.getWaterDrag(dt) < 0
    boat.v = -1.0
    assert boat.getWaterDrag(dt) > 0
    boat.v = 0.0
    assert boat.getWaterDrag(dt) == 0


def test_step():
    '''A steady seaward force moves the boat seaward.'''

    boat = Boat()
    boat.reset(300)
    for i in range(10):
        info = boat.step(1000, 0, 1, dt)

    assert boat.v > 0
    assert boat.x > 300
    assert info['instability'] == False
    assert_allclose(info['F'], boat.F)


def test_snap_to_rest():

    boat = Boat()
    boat.reset(300)
    boat.v = 0.005
    info = boat.step(1.0, 0, 1, dt)

    assert info['atRest']
    assert boat.v == 0


def test_instability_guard():
    '''A non-finite force resets the boat to its last good position instead of propagating NaNs.'''

    boat = Boat()
    boat.reset(300)
    boat.step(500, 0, 1, dt)
    xGood = boat.x

    info = boat.step(np.nan, 0, 1, dt)

    assert info['instability']
    assert boat.v == 0
    assert_allclose(boat.x, xGood)

    info = boat.step(np.inf, 0, 1, dt)
    assert info['instability']
    assert np.isfinite(boat.x)


def test_attitude():

    boat = Boat(length=500)
    boat.reset(350, 120)

    assert_allclose(boat.rBow, [100, 195])
    assert_allclose(boat.rStern, [600, 195])

    boat.setAttitude(120, 0.1)      # bow up
    assert boat.rBow[1] > boat.rStern[1]
    assert boat.rBow[0] < boat.rStern[0]
    assert_allclose(np.linalg.norm(boat.rBow - [350, 120]), np.hypot(250, 75))

    Xh, Yh = boat.getHullCoords()
    assert len(Xh) == len(Yh) == 5
    assert_allclose([Xh[0], Yh[0]], [Xh[-1], Yh[-1]])



if __name__ == '__main__':

    boat = Boat()
    boat.reset(300)
    for i in range(120):
        info = boat.step(-200, 10, -1, dt)
    print(boat.x, boat.v, info)
