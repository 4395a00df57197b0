
import logging

import numpy as np


logger = logging.getLogger(__name__)


class Anchor():
    '''A seabed anchor that holds until the line tension exceeds its holding
    force and then creeps along the seabed toward the dock.'''

    def __init__(self, basePosition, holdingForce=1200.0, dragSpeed=10.0, graceTime=5.0, settleTime=1.0,
                 settleAngle=0.35):
        '''Initialize Anchor attributes

        Parameters
        ----------
        basePosition : float
            configured anchor x coordinate [cm]
        holdingForce : float, optional
            horizontal line tension beyond which the anchor drags [N]. The default is 1200.
        dragSpeed : float, optional
            creep speed while dragging [cm/s]. The default is 10.
        graceTime : float, optional
            time after a mooring reconfiguration during which the anchor always holds [s]. The default is 5.
        settleTime : float, optional
            decay time constant of the settling rotation once dragging stops [s]. The default is 1.
        settleAngle : float, optional
            settling rotation applied while dragging [rad]. Presentation only.
        '''

        self.x0 = float(basePosition)
        self.x = float(basePosition)
        self.holdingForce = float(holdingForce)
        self.dragSpeed = float(dragSpeed)
        self.graceTime = float(graceTime)
        self.settleTime = float(settleTime)
        self.settleAngle = float(settleAngle)

        self.dragged = False        # sticky until reset
        self.dragging = False       # dragging during the latest update
        self.angle = 0.0            # settling rotation [rad]


    @property
    def r(self):
        '''anchor position on the seabed [cm]'''
        return np.array([self.x, 0.0])


    def reset(self, basePosition=None):
        '''Snaps the anchor back to its base position and clears the drag flags.'''
        if basePosition is not None:
            self.x0 = float(basePosition)
        self.x = self.x0
        self.dragged = False
        self.dragging = False
        self.angle = 0.0


    def updateDrag(self, tension, elapsed, dt, xMin):
        '''Moves the anchor toward the dock if the line tension exceeds the holding force.

        Parameters
        ----------
        tension : float
            horizontal line tension at the anchor [N]
        elapsed : float
            time since the last mooring reconfiguration [s]
        dt : float
            time step [s]
        xMin : float
            closest x coordinate to the dock the anchor can be dragged to [cm]

        Returns
        -------
        dragging : bool
            True if the anchor moved during this update
        '''

        self.dragging = False

        if tension > self.holdingForce and elapsed >= self.graceTime and self.x > xMin:
            self.x = max(self.x - self.dragSpeed*dt, xMin)
            self.dragging = True
            self.angle = self.settleAngle
            if not self.dragged:
                logger.warning("anchor dragging: tension %.0f N exceeds holding force %.0f N", tension, self.holdingForce)
            self.dragged = True
        else:
            self.angle *= np.exp(-dt/self.settleTime)

        return self.dragging



class Dock():
    '''The dock the bow line is tied to, either fixed or floating on the waves.'''

    def __init__(self, height=200.0, floating=False, freeboard=15.0, x=0.0):
        '''
        Parameters
        ----------
        height : float
            attachment elevation above the seabed for a fixed dock [cm]
        floating : bool
            if True the attachment rides freeboard above the local water surface
        freeboard : float
            floating dock attachment height above the water [cm]
        x : float
            x coordinate of the dock face [cm]
        '''

        self.height = float(height)
        self.floating = floating
        self.freeboard = float(freeboard)
        self.x = float(x)


    def getAttachment(self, env):
        '''Returns the bow line attachment point for the given environment [cm].'''
        if self.floating:
            return np.array([self.x, float(env.getWaveElevation(self.x)) + self.freeboard])
        return np.array([self.x, self.height])
