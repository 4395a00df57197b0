
import logging

import numpy as np

from moorsim.helpers import CatenaryError


logger = logging.getLogger(__name__)

STRAIGHT_TOL  = 0.01   # distance within which a line counts as pulled straight [cm]
VERTICAL_SPAN = 4.0    # horizontal span below which the line is treated as hanging vertically [cm]
SEABED_MARGIN = 0.5    # allowed dip of a free catenary below the seabed plane [cm]


def catenary(x1, y1, x2, y2, L, Tol=0.001, maxIter=20, nSegs=0):
    '''Solves the hanging-chain curve of an inextensible line between two points.

    The curve is y = a*cosh((x-p)/a) + q with y measured upward. The shape
    parameter comes from Newton-Raphson iteration on sinh(z)/z = sqrt(L^2-v^2)/h
    with z = h/(2a), h the horizontal span and v the vertical offset.

    Parameters
    ----------
    x1, y1 : float
        coordinates of end A [cm]
    x2, y2 : float
        coordinates of end B [cm]
    L : float
        unstretched line length [cm]
    Tol : float, optional
        convergence tolerance on the sinh(z)/z residual. The default is 0.001.
    maxIter : int, optional
        maximum number of Newton-Raphson iterations. The default is 20.
    nSegs : int, optional
        number of sampled segments. If 0, 50 for lines longer than 500 cm and 30 otherwise.

    Raises
    ------
    CatenaryError
        If the inputs are not finite or the length is negative.

    Returns
    -------
    info : dict
        mode : 'straight', 'vertical' or 'catenary'
        a : shape parameter [cm] (0 for straight and vertical modes)
        p, q : horizontal and vertical offsets of the curve [cm]
        X, Y : sampled point coordinates from end A to end B [cm]
        iterations : Newton-Raphson iterations used
    '''

    if not np.all(np.isfinite([x1, y1, x2, y2, L])):
        raise CatenaryError(f"catenary inputs must be finite, got ({x1}, {y1}), ({x2}, {y2}), L={L}")
    if L < 0:
        raise CatenaryError(f"catenary line length cannot be negative ({L})")

    dx = x2 - x1
    dy = y2 - y1
    dist = np.hypot(dx, dy)

    info = dict(mode='catenary', a=0.0, p=0.0, q=0.0, iterations=0)

    # taut (or over-stretched) line: tension comes from the elastic model elsewhere
    if dist >= L - STRAIGHT_TOL:
        info['mode'] = 'straight'
        info['X'] = np.array([x1, x2], dtype=float)
        info['Y'] = np.array([y1, y2], dtype=float)
        return info

    h = abs(dx)
    v = dy

    # near-vertical hang: cosh blows up as h -> 0, so use two vertical legs meeting at a nadir
    if h < VERTICAL_SPAN:
        yNadir = 0.5*(y1 + y2 - L)
        xMid = 0.5*(x1 + x2)
        info['mode'] = 'vertical'
        info['p'] = xMid
        info['q'] = yNadir
        info['X'] = np.array([x1, x1, xMid, x2, x2], dtype=float)
        info['Y'] = np.array([y1, 0.5*(y1 + yNadir), yNadir, 0.5*(y2 + yNadir), y2], dtype=float)
        logger.debug("catenary: vertical hang, span %.2f cm, nadir at %.1f cm", h, yNadir)
        return info

    rhs = np.sqrt(L*L - v*v)/h

    z = 1.0
    if rhs > 100:       # deep loop, start closer to the root
        z = 6.0

    for iter in range(maxIter):
        sinhZ = np.sinh(z)
        coshZ = np.cosh(z)
        f = sinhZ/z - rhs
        info['iterations'] = iter + 1
        if abs(f) < Tol:
            break

        df = (z*coshZ - sinhZ)/(z*z)
        if abs(df) < 1e-9:
            break

        dz = f/df
        if abs(dz) > 1.0:
            dz = np.sign(dz)*1.0

        z = max(z - dz, 0.01)

    a = h/(2*z)

    # offsets so the curve passes through both ends, worked out left to right
    if dx >= 0:
        xl, yl, xr, yr = x1, y1, x2, y2
    else:
        xl, yl, xr, yr = x2, y2, x1, y1
    vlr = yr - yl
    ratio = (L + vlr)/(L - vlr)
    shift = a*np.log(ratio) if ratio > 0 else 0.0
    p = 0.5*(xl + xr - shift)
    q = yr - a*np.cosh((xr - p)/a)

    if nSegs <= 0:
        nSegs = 50 if L > 500 else 30

    X = np.linspace(x1, x2, nSegs + 1)
    Y = a*np.cosh((X - p)/a) + q
    Y[0] = y1
    Y[-1] = y2

    info['a'] = a
    info['p'] = p
    info['q'] = q
    info['X'] = X
    info['Y'] = Y

    return info


def seabedCatenary(xA, xB, yB, L, Tol=1.0, maxIter=20, nSegs=0):
    '''Solves the profile of a line running from an anchor on the seabed to a
    suspended attachment point, without letting the line pass below the seabed.

    Three outcomes are possible: the free catenary already stays above the
    seabed; the line has so much slack that it hangs straight down and lies
    flat (no tension); or part of the line rests on the seabed and the
    suspended part touches down tangentially. In the last case the suspended
    arc length s is found by bisection over [yB, L].

    Parameters
    ----------
    xA : float
        anchor x coordinate, on the seabed y=0 [cm]
    xB, yB : float
        attachment point coordinates, yB being height above the seabed [cm]
    L : float
        unstretched line length [cm]
    Tol : float, optional
        horizontal closure tolerance for the bisection [cm]. The default is 1.0.
    maxIter : int, optional
        maximum number of bisection iterations. The default is 20.
    nSegs : int, optional
        number of sampled segments along the suspended part (see catenary).

    Returns
    -------
    info : dict
        as for catenary, with mode 'straight', 'vertical', 'catenary', 'seabed'
        or 'resting', plus LBot, the length lying on the seabed [cm], and
        xTouch, the touchdown x coordinate (None if there is none).
    '''

    X = abs(xB - xA)
    h = yB
    direction = 1.0 if xB >= xA else -1.0

    # attachment at or below the seabed: nothing can be suspended
    if h <= 0:
        if X >= L - STRAIGHT_TOL:
            info = catenary(xA, 0.0, xB, 0.0, L)
        else:
            info = dict(mode='resting', a=0.0, p=xA, q=0.0, iterations=0,
                        X=np.array([xA, xB], dtype=float), Y=np.array([0.0, 0.0]))
        info['LBot'] = min(L, X)
        info['xTouch'] = None
        return info

    info = catenary(xA, 0.0, xB, h, L, nSegs=nSegs)
    info['LBot'] = 0.0
    info['xTouch'] = None

    if info['mode'] == 'straight' or np.min(info['Y']) >= -SEABED_MARGIN:
        return info

    # more slack than the path down and along the bottom: line lies slack on the seabed
    if L > h + X:
        logger.debug("seabedCatenary: excess slack (L=%.1f > h+X=%.1f), zero tension", L, h + X)
        return dict(mode='resting', a=0.0, p=xB, q=0.0, iterations=0, LBot=L - h, xTouch=xB,
                    X=np.array([xA, xB, xB], dtype=float), Y=np.array([0.0, 0.0, h]))

    def reach(s):
        '''horizontal extent of a suspended length s touching down tangentially'''
        a = (s*s - h*h)/(2*h)
        if a <= 0:
            return 0.0, 0.0
        return a, a*np.arcsinh(s/a)

    sLo = h
    sHi = L
    s = 0.5*(sLo + sHi)
    for iter in range(maxIter):
        s = 0.5*(sLo + sHi)
        a, xs = reach(s)
        err = xs + (L - s) - X
        if abs(err) <= Tol:
            break
        if err > 0:
            sHi = s
        else:
            sLo = s

    a, xs = reach(s)
    if a <= 0:       # degenerate touchdown right below the attachment
        a = 0.0
        xs = 0.0
    xTouch = xB - direction*xs

    if nSegs <= 0:
        nSegs = 50 if s > 500 else 30

    if a > 0:
        Xc = np.linspace(xTouch, xB, nSegs + 1)
        Yc = a*(np.cosh((Xc - xTouch)/a) - 1.0)
    else:
        Xc = np.array([xB, xB])
        Yc = np.array([0.0, h])
    Yc[-1] = h

    info = dict(mode='seabed', a=a, p=xTouch, q=-a, iterations=iter + 1, LBot=L - s, xTouch=xTouch,
                X=np.hstack([[xA], Xc]), Y=np.hstack([[0.0], Yc]))

    return info


def getArcLength(X, Y):
    '''Returns the polyline length of sampled line coordinates.'''
    return np.sum(np.hypot(np.diff(X), np.diff(Y)))


def getMaxSag(X, Y):
    '''Returns the largest vertical distance of sampled line coordinates below
    the chord joining their first and last points.'''

    X = np.asarray(X, dtype=float)
    Y = np.asarray(Y, dtype=float)
    if X[-1] == X[0]:
        return max(0.0, min(Y[0], Y[-1]) - np.min(Y))
    chord = Y[0] + (Y[-1] - Y[0])*(X - X[0])/(X[-1] - X[0])
    return max(0.0, np.max(chord - Y))
