
import logging

import numpy as np

from moorsim.catenary import catenary, seabedCatenary
from moorsim.helpers import LineError


logger = logging.getLogger(__name__)


class MooringLine():
    '''A mooring line of up to two materials: a chain segment at end A and a
    rope segment at end B. End B is always the boat's attachment point.'''

    def __init__(self, name, chainLength, ropeLength, chainType=None, ropeType=None, seabed=False, nSegs=0):
        '''Initialize MooringLine attributes

        Parameters
        ----------
        name : str
            identifier used in log messages and errors (e.g. 'stern' or 'bow')
        chainLength : float
            unstretched chain length at end A [cm]
        ropeLength : float
            unstretched rope length at end B [cm]
        chainType : dict, optional
            lineType dictionary of the chain (see helpers.getLineProps). Required if chainLength > 0.
        ropeType : dict, optional
            lineType dictionary of the rope. Required if ropeLength > 0.
        seabed : bool, optional
            True if end A sits on the seabed (anchor), so the seabed-constrained
            solver is used. The default is False.
        nSegs : int, optional
            number of sampled segments for the line profile (0 picks based on length).

        Returns
        -------
        None.

        '''

        self.name = name
        self.LChain = float(chainLength)
        self.LRope  = float(ropeLength)
        self.chainType = chainType
        self.ropeType  = ropeType
        self.seabed = seabed
        self.nSegs = nSegs

        if self.LChain > 0 and chainType is None:
            raise LineError(name, "a chain segment needs a chainType")
        if self.LRope > 0 and ropeType is None:
            raise LineError(name, "a rope segment needs a ropeType")

        self.rA = np.zeros(2)   # end coordinates [cm]
        self.rB = np.zeros(2)
        self.fA = 0.0           # horizontal end forces [N]
        self.fB = 0.0

        self.mode = ''          # solver mode of the latest solve
        self.dist = 0.0         # straight-line end to end distance [cm]
        self.stretch = 0.0      # elongation beyond the unstretched length [cm]
        self.w = 0.0            # effective unit weight [N/cm]
        self.T = 0.0            # line tension at end B [N]
        self.HF = 0.0           # horizontal tension [N]
        self.info = {}


    @property
    def L(self):
        '''total unstretched length [cm]'''
        return self.LChain + self.LRope


    def setEndPosition(self, r, endB):
        '''Sets the end position of the line based on the input endB value.

        Parameters
        ----------
        r : array
            x,y coordinate position vector of the line end [cm].
        endB : boolean
            An indicator of whether the r array is at the end or beginning of the line

        Raises
        ------
        LineError
            If the given endB value is not a 1 or 0
        '''

        if endB == 1:
            self.rB = np.array(r, dtype=float)
        elif endB == 0:
            self.rA = np.array(r, dtype=float)
        else:
            raise LineError(self.name, "setEndPosition: endB value has to be either 1 or 0")


    def getMaxStretch(self):
        '''Returns the longest end to end distance the line can reach [cm].'''

        maxL = 0.0
        if self.LChain > 0:
            maxL += self.LChain*self.chainType['stretch']
        if self.LRope > 0:
            maxL += self.LRope*self.ropeType['stretch']
        return maxL


    def getUnitWeight(self, dist=None):
        '''Effective unit weight of the lifted part of the line [N/cm].

        The rope at end B is always counted as lifted. Chain is counted only
        for the part of the end to end distance that the rope cannot cover,
        so the heavy chain adds weight once it starts to come off the bottom.
        '''

        if dist is None:
            dist = self.dist

        if self.LChain <= 0:
            return self.ropeType['w'] if self.LRope > 0 else 0.0
        if self.LRope <= 0:
            return self.chainType['w']

        liftedChain = np.clip(dist - self.LRope, 0.0, self.LChain)
        return (self.LRope*self.ropeType['w'] + liftedChain*self.chainType['w'])/(self.LRope + liftedChain)


    def getTautProps(self):
        '''Returns the base tension [N] and stiffness [N/cm] used once the line is pulled straight.'''
        lineType = self.ropeType if self.LRope > 0 else self.chainType
        return lineType['T0'], lineType['k']


    def staticSolve(self):
        '''Solves the line profile for the current end positions and sets the
        line tensions and the horizontal end forces.

        Straight lines use the elastic model T = T0 + k*stretch with the
        horizontal component T*cos(elevation angle). Slack lines use the
        catenary identity H = a*w.
        '''

        dr = self.rB - self.rA
        self.dist = np.hypot(dr[0], dr[1])
        self.w = self.getUnitWeight()

        # no line rigged: nothing to solve and no load on either end
        if self.L <= 0:
            self.info = dict(mode='absent', a=0.0, p=0.0, q=0.0, iterations=0,
                             X=np.array([self.rA[0], self.rB[0]]), Y=np.array([self.rA[1], self.rB[1]]))
            self.mode = 'absent'
            self.stretch = 0.0
            self.T = 0.0
            self.HF = 0.0
            self.fA = 0.0
            self.fB = 0.0
            return

        if self.seabed:
            self.info = seabedCatenary(self.rA[0], self.rB[0], self.rB[1] - self.rA[1], self.L, nSegs=self.nSegs)
            self.info['Y'] = self.info['Y'] + self.rA[1]
        else:
            self.info = catenary(self.rA[0], self.rA[1], self.rB[0], self.rB[1], self.L, nSegs=self.nSegs)

        self.mode = self.info['mode']

        if self.mode == 'straight':
            T0, k = self.getTautProps()
            self.stretch = max(self.dist - self.L, 0.0)
            self.T = T0 + k*self.stretch
            if self.dist > 0:
                self.HF = self.T*abs(dr[0])/self.dist     # T*cos(elevation angle)
            else:
                self.HF = 0.0
        else:
            self.stretch = 0.0
            self.HF = abs(self.info['a']*self.w)
            if self.mode == 'catenary':
                self.T = max(self.w*(self.rB[1] - self.info['q']), self.HF)   # T = w*(y - q) at end B
            elif self.mode == 'seabed':
                self.T = max(self.w*(self.rB[1] - self.rA[1] - self.info['q']), self.HF)
            else:
                self.T = self.HF

        # horizontal forces pull each end toward the other
        sign = np.sign(dr[0])
        self.fB = -sign*self.HF
        self.fA =  sign*self.HF

        logger.debug("%s line: mode=%s dist=%.1f/%.1f cm H=%.1f N T=%.1f N",
                     self.name, self.mode, self.dist, self.L, self.HF, self.T)


    def getEndForce(self, endB):
        '''Returns the horizontal force of the line at the specified end [N]

        Raises
        ------
        LineError
            If the given endB value is not a 1 or 0
        '''

        if endB == 1:
            return self.fB
        elif endB == 0:
            return self.fA
        else:
            raise LineError(self.name, "getEndForce: endB value has to be either 1 or 0")


    def getLineCoords(self):
        '''Gets the sampled line coordinates from end A to end B for drawing and plotting purposes.'''

        if not self.info:
            self.staticSolve()
        return self.info['X'], self.info['Y']


    def getStretchRatio(self):
        '''Returns the end to end distance relative to the maximum stretch [-].'''
        maxL = self.getMaxStretch()
        if maxL <= 0:
            return 0.0
        return self.dist/maxL


    def isRigged(self):
        '''Returns False for a line of zero length, which exerts no force and limits nothing.'''
        return self.L > 0


    def drawLine2d(self, ax, color="k", lw=1, label=""):
        '''Draw the line profile on a 2D matplotlib axis and return the plotted lines.'''

        Xs, Ys = self.getLineCoords()
        return ax.plot(Xs, Ys, lw=lw, color=color, label=label)
