
import logging

import numpy as np

from moorsim.helpers import rotate2d


logger = logging.getLogger(__name__)

RHO_AIR   = 1.225       # [kg/m^3]
RHO_WATER = 1025.0      # [kg/m^3]
CM_PER_M  = 100.0


class Boat():
    '''A moored boat with a single horizontal degree of freedom. The hull
    elevation and tilt are set geometrically (see constraints.solveAttitude).

    The bow points toward the dock at lower x. Positions are in cm, the
    velocity in cm per tick and forces in N.
    '''

    def __init__(self, length=500.0, baseMass=800.0, massScale=4.0, minLength=300.0, minMass=50.0,
                 windTuning=2.0, dragCoeff=0.5, linearDrag=100.0, damping=0.98,
                 restVelocity=0.01, restForce=5.0):
        '''Initialize Boat attributes

        Parameters
        ----------
        length : float
            hull length [cm]
        baseMass, massScale, minLength, minMass : float
            mass heuristic m = baseMass + massScale*(length - minLength), floored at minMass [kg]
        windTuning : float
            scaling of the aerodynamic wind force [-]
        dragCoeff : float
            quadratic water drag coefficient [-]
        linearDrag : float
            linear viscous water drag [N/(m/s)]
        damping : float
            velocity damping factor applied every tick [-]
        restVelocity, restForce : float
            below both of these [cm/tick, N] the boat is snapped to rest
        '''

        self.length = float(length)
        self.baseMass = baseMass
        self.massScale = massScale
        self.minLength = minLength
        self.minMass = minMass
        self.windTuning = windTuning
        self.dragCoeff = dragCoeff
        self.linearDrag = linearDrag
        self.damping = damping
        self.restVelocity = restVelocity
        self.restForce = restForce

        self.x = 0.0            # hull center x [cm]
        self.v = 0.0            # [cm/tick]
        self.y = 0.0            # hull center elevation above the seabed [cm]
        self.tilt = 0.0         # bow-up tilt [rad]
        self.xLast = 0.0        # last finite position [cm]

        self.fWind = 0.0        # force components of the latest step [N]
        self.fWater = 0.0
        self.fLines = 0.0
        self.F = 0.0

        self.rBow = np.zeros(2)     # line attachment points [cm]
        self.rStern = np.zeros(2)


    @property
    def halfL(self):
        return 0.5*self.length

    @property
    def height(self):
        '''hull height [cm]'''
        return 0.3*self.length

    @property
    def deckOffset(self):
        '''height of the line attachments above the hull center [cm]'''
        return 0.5*self.height

    @property
    def keelOffset(self):
        '''depth of the keel below the hull center [cm]'''
        return 0.15*self.length


    def getMass(self):
        '''Boat mass [kg]. A tuning heuristic (bigger boat, more inertia), not a physical law.'''
        return max(self.baseMass + self.massScale*(self.length - self.minLength), self.minMass)


    def getWindageArea(self):
        '''area presented to the wind [m^2]'''
        return 0.12*(self.length/CM_PER_M)**2

    def getSubmergedArea(self):
        '''underwater area presented to the flow [m^2]'''
        return 0.04*(self.length/CM_PER_M)**2


    def getWindForce(self, windSpeed, windDirection):
        '''Returns the horizontal wind force [N]; wind from the sea (+1) pushes toward the dock (-x).'''
        u = -windDirection*windSpeed
        return np.sign(u)*0.5*RHO_AIR*self.getWindageArea()*u*u*self.windTuning


    def getWaterDrag(self, dt):
        '''Returns the water resistance on the current velocity [N].'''
        vms = self.v/CM_PER_M/dt        # [m/s]
        return -np.sign(vms)*0.5*RHO_WATER*self.dragCoeff*self.getSubmergedArea()*vms*vms - self.linearDrag*vms


    def step(self, fLines, windSpeed, windDirection, dt):
        '''Integrates the boat's horizontal motion over one tick (semi-implicit Euler).

        Parameters
        ----------
        fLines : float
            net horizontal force of the mooring lines on the boat [N]
        windSpeed : float
            wind speed [m/s]
        windDirection : int
            +1 for wind from the sea, -1 for wind from the dock
        dt : float
            time step [s]

        Returns
        -------
        info : dict
            F : net force [N], instability : True if a non-finite state was
            recovered, atRest : True if the boat was snapped to rest
        '''

        info = dict(F=0.0, instability=False, atRest=False)

        self.fWind = self.getWindForce(windSpeed, windDirection)
        self.fWater = self.getWaterDrag(dt)
        self.fLines = fLines
        self.F = self.fWind + self.fWater + self.fLines

        acc = self.F/self.getMass()                     # [m/s^2]
        self.v += acc*CM_PER_M*dt*dt                    # [cm/tick]
        self.v *= self.damping
        self.x += self.v

        if not (np.isfinite(self.v) and np.isfinite(self.x)):
            logger.warning("numerical instability in boat dynamics (x=%s, v=%s, F=%s); resetting", self.x, self.v, self.F)
            self.v = 0.0
            self.x = self.xLast
            info['instability'] = True
        elif abs(self.v) < self.restVelocity and abs(self.F) < self.restForce:
            self.v = 0.0
            info['atRest'] = True

        self.xLast = self.x
        info['F'] = self.F
        return info


    def setAttitude(self, y, tilt):
        '''Sets the hull center elevation and tilt and updates the line attachment points.'''

        self.y = y
        self.tilt = tilt
        center = np.array([self.x, self.y])
        # bow toward -x; a positive tilt raises the bow
        self.rBow   = center + rotate2d(np.array([-self.halfL, self.deckOffset]), -tilt)
        self.rStern = center + rotate2d(np.array([ self.halfL, self.deckOffset]), -tilt)


    def getHullCoords(self):
        '''Returns the hull outline (deck at the top, narrower keel at the bottom) for plotting.'''

        local = np.array([[-self.halfL, self.deckOffset], [self.halfL, self.deckOffset],
                          [self.halfL - 0.13*self.length, -self.deckOffset],
                          [-self.halfL + 0.13*self.length, -self.deckOffset],
                          [-self.halfL, self.deckOffset]])
        pts = np.array([rotate2d(p, -self.tilt) for p in local]) + np.array([self.x, self.y])
        return pts[:,0], pts[:,1]


    def reset(self, x0, y0=0.0):
        self.x = x0
        self.xLast = x0
        self.v = 0.0
        self.fWind = 0.0
        self.fWater = 0.0
        self.fLines = 0.0
        self.F = 0.0
        self.setAttitude(y0, 0.0)
