
import logging

import numpy as np


logger = logging.getLogger(__name__)

NORMAL    = 'normal'
STRESSED  = 'stressed'
COLLIDING = 'colliding'
CRITICAL  = 'critical'
SUNK      = 'sunk'

SINK_DEPTH     = 5.0     # forced submersion that sinks the boat [cm]
CRITICAL_MARGIN = 0.5    # [cm]
COLLISION_GAP  = 1.0     # [cm]
STRESS_RATIO   = 0.98    # [-]
MAX_TILT_SIN   = 0.9
STEEP_TILT     = 0.5     # [rad]


def getAllowedOffset(maxStretch, verticalOffset):
    '''Horizontal reach of a line of length maxStretch whose ends are
    verticalOffset apart (zero when the ends are too far apart vertically).'''

    dy = abs(verticalOffset)
    if dy < maxStretch:
        return np.sqrt(maxStretch*maxStretch - dy*dy)
    return 0.0


def clampPosition(x, halfL, attachY, rDock, rAnchor, bowMax, sternMax):
    '''Projects a candidate hull center position into the interval allowed by
    both mooring lines and the dock face.

    Parameters
    ----------
    x : float
        candidate hull center x [cm]
    halfL : float
        half the hull length [cm]
    attachY : float
        elevation of the line attachments at the boat [cm]
    rDock, rAnchor : array
        dock and anchor attachment points [cm]
    bowMax, sternMax : float
        maximum stretched lengths of the bow and stern lines [cm], 0 if a line is not rigged

    Returns
    -------
    x : float
        admissible hull center x [cm]
    info : dict
        lo, hi : bounds of the admissible interval, feasible : False if the
        interval was empty (x is then its midpoint), clamped : -1/+1 if x was
        moved up to the lower/upper bound, 0 otherwise
    '''

    # bow attachment sits halfL toward the dock, stern attachment halfL seaward.
    # A line of zero length is not rigged and does not limit the position.
    loBow, hiBow = -np.inf, np.inf
    if bowMax > 0:
        dxBow = getAllowedOffset(bowMax, attachY - rDock[1])
        loBow, hiBow = rDock[0] - dxBow + halfL, rDock[0] + dxBow + halfL

    loStern, hiStern = -np.inf, np.inf
    if sternMax > 0:
        dxStern = getAllowedOffset(sternMax, attachY - rAnchor[1])
        loStern, hiStern = rAnchor[0] - dxStern - halfL, rAnchor[0] + dxStern - halfL
    loDock = rDock[0] + halfL

    lo = max(loBow, loStern, loDock)
    hi = min(hiBow, hiStern)

    info = dict(lo=lo, hi=hi, feasible=True, clamped=0)

    if lo > hi:
        info['feasible'] = False
        logger.debug("clampPosition: no admissible position (lo=%.1f > hi=%.1f), using midpoint", lo, hi)
        return 0.5*(lo + hi), info

    if x < lo:
        info['clamped'] = -1
        return lo, info
    if x > hi:
        info['clamped'] = 1
        return hi, info
    return x, info


def solveAttitude(boat, env, rDock, rAnchor, bowMax, sternMax):
    '''Sets the hull elevation and tilt from the local wave elevation under
    bow and stern, the keel clearance, and the reach of each line.

    Each end floats at its local wave elevation unless the seabed holds it
    up or its mooring line holds it down or up. The tilt follows from the
    two end elevations over the hull length.

    Returns
    -------
    info : dict
        bowY, sternY : solved end elevations, bowNat, sternNat : their free
        floating elevations [cm]
    '''

    deck = boat.deckOffset
    groundLimit = boat.keelOffset

    xBow = boat.x - boat.halfL
    xStern = boat.x + boat.halfL

    bowNat = float(env.getWaveElevation(xBow))
    sternNat = float(env.getWaveElevation(xStern))

    bowY = max(bowNat, groundLimit)
    dx = abs(xBow - rDock[0])
    if dx < bowMax:
        maxDy = np.sqrt(bowMax*bowMax - dx*dx)
        bowY = min(bowY, rDock[1] + maxDy - deck)      # can't float up past the line
        bowY = max(bowY, rDock[1] - maxDy - deck)      # hangs from the line if the water drops

    sternY = max(sternNat, groundLimit)
    dx = abs(xStern - rAnchor[0])
    if dx < sternMax:
        maxDy = np.sqrt(sternMax*sternMax - dx*dx)
        sternY = min(sternY, rAnchor[1] + maxDy - deck)
        sternY = max(sternY, rAnchor[1] - maxDy - deck)

    sinTilt = np.clip((bowY - sternY)/boat.length, -MAX_TILT_SIN, MAX_TILT_SIN)
    tilt = np.arcsin(sinTilt)
    if abs(tilt) > STEEP_TILT:
        tilt *= 0.8

    boat.setAttitude(0.5*(bowY + sternY), tilt)

    return dict(bowY=bowY, sternY=sternY, bowNat=bowNat, sternNat=sternNat)


def classifyStatus(attitude, bowLine, sternLine, bowGap, windSpeed, windDirection, isSunk=False):
    '''Returns the mooring status, checked in priority order: sunk, critical,
    colliding, stressed, normal.

    Parameters
    ----------
    attitude : dict
        output of solveAttitude
    bowLine, sternLine : MooringLine
        solved lines at the final boat position
    bowGap : float
        distance between the hull bow and the dock face [cm]
    windSpeed : float
        [m/s]
    windDirection : int
        +1 wind from the sea (loads the stern line), -1 wind from the dock (loads the bow line)
    isSunk : bool
        sticky flag from earlier ticks
    '''

    if (isSunk or attitude['bowY'] < attitude['bowNat'] - SINK_DEPTH
              or attitude['sternY'] < attitude['sternNat'] - SINK_DEPTH):
        return SUNK

    bowLoaded = windSpeed > 0 and windDirection == -1
    sternLoaded = windSpeed > 0 and windDirection == 1

    if bowLoaded and bowLine.isRigged() and bowLine.dist >= bowLine.getMaxStretch() - CRITICAL_MARGIN:
        return CRITICAL
    if bowGap <= COLLISION_GAP:
        return COLLIDING
    if (bowLoaded and bowLine.getStretchRatio() > STRESS_RATIO) or (sternLoaded and sternLine.getStretchRatio() > STRESS_RATIO):
        return STRESSED
    return NORMAL
