
import logging

import numpy as np

from moorsim.helpers import ConfigError, SimulationError, getFromDict, getLineProps, loadConfig, loadLineProps
from moorsim.environment import Environment
from moorsim.point import Anchor, Dock
from moorsim.boat import Boat
from moorsim.line import MooringLine
from moorsim.constraints import clampPosition, solveAttitude, classifyStatus, NORMAL, SUNK


logger = logging.getLogger(__name__)

WEATHER_MODES = ('OFF', 'NORMAL', 'EXTREME')

# restart values of the harbor simulator
DEFAULT_CONFIG = dict(
    waterLevelCm              = 20.0,
    seabedDepthCm             = 100.0,
    waveHeightCm              = 10.0,
    dockHeightCm              = 200.0,
    isFloatingDock            = False,
    sternChainLengthCm        = 497.0,
    sternRopeLengthCm         = 203.0,
    bowRopeLengthCm           = 120.0,
    anchorPositionCm          = 800.0,     # seaward of the boat's rest position
    boatLengthCm              = 500.0,
    windSpeedMs               = 5.0,
    windDirection             = -1,
    chainThicknessMm          = 10.0,
    weatherMode               = 'OFF',
    # tuning
    gustFactor                = 0.35,
    holdingForceN             = 1200.0,
    dragSpeedCmS              = 10.0,
    graceSeconds              = 5.0,
    tautBaseTensionN          = 1500.0,
    tautStiffnessNPerCm       = 300.0,
    bowStretchAllowance       = 1.10,
    sternRopeStretchAllowance = 1.03,
    dt                        = 1/60,
)

# keys whose change counts as a mooring reconfiguration (anchor reset, new grace period)
MOORING_KEYS = ('sternChainLengthCm', 'sternRopeLengthCm', 'bowRopeLengthCm', 'chainThicknessMm',
                'anchorPositionCm', 'boatLengthCm', 'tautBaseTensionN', 'tautStiffnessNPerCm',
                'bowStretchAllowance', 'sternRopeStretchAllowance')

# per-tick environment inputs and the Environment attribute each one drives
ENV_INPUTS = dict(windSpeedMs='windSpeed', windDirection='windDirection', waterLevelCm='waterLevel',
                  waveHeightCm='waveHeight', seabedDepthCm='seabedDepth', gustFactor='gustFactor')

SINK_RATE = 0.5             # [cm/tick]
SUNK_TILT = np.pi/12        # [rad]


def validateConfig(config):
    '''Checks a complete configuration dictionary and raises ConfigError for
    values the simulation cannot run with.'''

    unknown = [key for key in config if key not in DEFAULT_CONFIG]
    if len(unknown) > 0:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    try:
        for key in ['sternChainLengthCm', 'sternRopeLengthCm', 'bowRopeLengthCm', 'seabedDepthCm', 'chainThicknessMm',
                    'waveHeightCm', 'dockHeightCm', 'anchorPositionCm', 'holdingForceN', 'dragSpeedCmS', 'graceSeconds',
                    'tautBaseTensionN', 'tautStiffnessNPerCm', 'gustFactor']:
            if getFromDict(config, key) < 0:
                raise ConfigError(f"{key} cannot be negative ({config[key]})")

        for key in ['boatLengthCm', 'dt']:
            if getFromDict(config, key) <= 0:
                raise ConfigError(f"{key} must be positive ({config[key]})")

        for key in ['bowStretchAllowance', 'sternRopeStretchAllowance']:
            if getFromDict(config, key) < 1.0:
                raise ConfigError(f"{key} must be at least 1 ({config[key]})")

        if getFromDict(config, 'sternChainLengthCm') > 0 and getFromDict(config, 'chainThicknessMm') <= 0:
            raise ConfigError("a stern chain needs a positive chainThicknessMm")

        if getFromDict(config, 'windDirection', dtype=int) not in (1, -1):
            raise ConfigError(f"windDirection must be 1 or -1 ({config['windDirection']})")

        if getFromDict(config, 'weatherMode', dtype=str) not in WEATHER_MODES:
            raise ConfigError(f"weatherMode must be one of {WEATHER_MODES} ({config['weatherMode']})")

        getFromDict(config, 'waterLevelCm')
        getFromDict(config, 'windSpeedMs')
        getFromDict(config, 'isFloatingDock', dtype=bool)

    except (ValueError, TypeError) as e:
        raise ConfigError(str(e)) from e


class System():
    '''The state of a moored boat simulation: boat, bow and stern mooring
    lines, anchor, dock and environment, advanced one tick at a time by
    tick().'''

    def __init__(self, config=None, lineProps=None, debugHook=None, **kwargs):
        '''Creates a harbor mooring system.

        Parameters
        ----------
        config : dict or filename, optional
            configuration values (or a YAML file holding them) overriding DEFAULT_CONFIG
        lineProps : dict or filename, optional
            line property coefficients (see helpers.loadLineProps). The default library is used if None.
        debugHook : callable, optional
            called with the debug snapshot dictionary after every tick
        kwargs
            further configuration values, applied after config

        Raises
        ------
        ConfigError
            If the resulting configuration is invalid.
        '''

        self.lineProps = loadLineProps(lineProps)

        config0 = dict(DEFAULT_CONFIG)
        if config is not None:
            config0.update(loadConfig(config))
        config0.update(kwargs)
        validateConfig(config0)
        self.config = config0

        self.debugHook = debugHook
        self.display = 0    # a flag that controls how much printing occurs (values > 0 print the per-tick snapshot)

        self.env = Environment()
        self.dock = Dock()
        self.boat = Boat()
        self.anchor = Anchor(0.0)
        self.bowLine = None
        self.sternLine = None

        self.restart()


    def _build(self):
        '''Applies the stored configuration to the simulation objects without
        touching the boat's motion or the anchor's current position.'''

        c = self.config

        self.dt = getFromDict(c, 'dt')
        self.weatherMode = getFromDict(c, 'weatherMode', dtype=str)

        self.env.seabedDepth   = getFromDict(c, 'seabedDepthCm')
        self.env.waterLevel    = getFromDict(c, 'waterLevelCm')
        self.env.waveHeight    = getFromDict(c, 'waveHeightCm')
        self.env.windSpeed     = getFromDict(c, 'windSpeedMs')
        self.env.windDirection = getFromDict(c, 'windDirection', dtype=int)
        self.env.gustFactor    = getFromDict(c, 'gustFactor')

        self.dock.height   = getFromDict(c, 'dockHeightCm')
        self.dock.floating = getFromDict(c, 'isFloatingDock', dtype=bool)

        self.boat.length = getFromDict(c, 'boatLengthCm')

        self.anchor.x0           = self.getRestPosition() + getFromDict(c, 'anchorPositionCm')
        self.anchor.holdingForce = getFromDict(c, 'holdingForceN')
        self.anchor.dragSpeed    = getFromDict(c, 'dragSpeedCmS')
        self.anchor.graceTime    = getFromDict(c, 'graceSeconds')

        taut = dict(T0=getFromDict(c, 'tautBaseTensionN'), k=getFromDict(c, 'tautStiffnessNPerCm'))
        chainType = getLineProps(getFromDict(c, 'chainThicknessMm'), 'chain', lineProps=self.lineProps, **taut)
        ropeType  = getLineProps(0, 'rope', lineProps=self.lineProps, name='sternRope',
                                 stretch=getFromDict(c, 'sternRopeStretchAllowance'), **taut)
        bowType   = getLineProps(0, 'bowrope', lineProps=self.lineProps, name='bowRope',
                                 stretch=getFromDict(c, 'bowStretchAllowance'), **taut)

        self.sternLine = MooringLine('stern', getFromDict(c, 'sternChainLengthCm'), getFromDict(c, 'sternRopeLengthCm'),
                                     chainType=chainType, ropeType=ropeType, seabed=True)
        self.bowLine = MooringLine('bow', 0.0, getFromDict(c, 'bowRopeLengthCm'), ropeType=bowType)


    def getRestPosition(self):
        '''hull center x coordinate of the boat at rest [cm]'''
        return max(200.0, 0.7*getFromDict(self.config, 'boatLengthCm'))


    def restart(self):
        '''Resets the simulation to the configuration-derived initial state.'''

        self._build()
        self.env.reset()
        self.anchor.reset()
        self.boat.reset(self.getRestPosition(), self.env.getSurface())

        self.configTime = 0.0       # simulated time of the latest mooring reconfiguration [s]
        self.isSunk = False
        self.status = NORMAL
        self.instabilityCount = 0
        self.nTicks = 0
        self.lastStep = dict(F=0.0, instability=False, atRest=False)
        self.clampInfo = dict(lo=self.boat.x, hi=self.boat.x, feasible=True, clamped=0)

        rDock = self.dock.getAttachment(self.env)
        self.attitude = solveAttitude(self.boat, self.env, rDock, self.anchor.r,
                                      self.bowLine.getMaxStretch(), self.sternLine.getMaxStretch())
        self.solveLines(rDock)
        logger.info("mooring system restarted: boat at %.1f cm, anchor at %.1f cm", self.boat.x, self.anchor.x)


    def configure(self, **changes):
        '''Applies configuration changes between ticks.

        A change to any of MOORING_KEYS is a mooring reconfiguration: the
        anchor snaps to its new base position, its dragged flag is cleared
        and the drag grace period starts over.

        Raises
        ------
        ConfigError
            If a key is unknown or the changed configuration is invalid. The
            configuration is left unchanged in that case.
        '''

        newConfig = dict(self.config)
        newConfig.update(changes)
        validateConfig(newConfig)

        oldConfig = self.config
        self.config = newConfig
        try:
            self._build()
        except Exception:
            self.config = oldConfig
            self._build()
            raise

        if any(key in MOORING_KEYS for key in changes):
            self.anchor.reset()
            self.configTime = self.env.time
            logger.info("mooring reconfigured (%s): anchor reset to %.1f cm",
                        ', '.join(key for key in changes if key in MOORING_KEYS), self.anchor.x)

        self.boat.setAttitude(self.boat.y, self.boat.tilt)     # attachments follow a new hull length
        self.solveLines(self.dock.getAttachment(self.env))


    def setInputs(self, **inputs):
        '''Writes per-tick environment values (e.g. from a weather generator).
        The values are trusted, only the keys are checked. They go to the
        environment only, so the configuration (and restart) keep the
        configured values.'''

        for key, val in inputs.items():
            if key not in ENV_INPUTS:
                raise SimulationError(f"'{key}' is not a per-tick environment input ({', '.join(ENV_INPUTS)})")
            setattr(self.env, ENV_INPUTS[key], val)


    def solveLines(self, rDock):
        '''Solves both mooring lines for the current attachment points.'''

        self.bowLine.setEndPosition(rDock, 0)
        self.bowLine.setEndPosition(self.boat.rBow, 1)
        self.sternLine.setEndPosition(self.anchor.r, 0)
        self.sternLine.setEndPosition(self.boat.rStern, 1)
        self.bowLine.staticSolve()
        self.sternLine.staticSolve()


    def getBowGap(self):
        '''distance between the hull bow and the dock face [cm]'''
        return self.boat.x - self.boat.halfL - self.dock.x


    def tick(self, dt=None, inputs=None):
        '''Advances the simulation by one tick (see tick).'''
        return tick(self, dt=dt, inputs=inputs)


    def _sink(self):
        '''Lets a sunk boat settle toward the seabed.'''

        boat = self.boat
        boat.v = 0.0
        boat.setAttitude(max(boat.y - SINK_RATE, boat.keelOffset), SUNK_TILT)
        self.solveLines(self.dock.getAttachment(self.env))


    def getSnapshot(self):
        '''Returns the per-tick outputs for rendering and debugging as a dictionary.'''

        boat = self.boat
        bowX, bowY = self.bowLine.getLineCoords()
        sternX, sternY = self.sternLine.getLineCoords()

        return dict(time=self.env.time, tick=self.nTicks, status=self.status, isSunk=self.isSunk,
                    x=boat.x, y=boat.y, tilt=boat.tilt, v=boat.v,
                    bowAttachment=np.array(boat.rBow), sternAttachment=np.array(boat.rStern),
                    dockAttachment=np.array(self.bowLine.rA),
                    anchorX=self.anchor.x, anchorAngle=self.anchor.angle,
                    dragged=self.anchor.dragged, dragging=self.anchor.dragging,
                    bowLineX=bowX, bowLineY=bowY, sternLineX=sternX, sternLineY=sternY,
                    bowMode=self.bowLine.mode, sternMode=self.sternLine.mode,
                    bowDist=self.bowLine.dist, bowMax=self.bowLine.getMaxStretch(),
                    sternDist=self.sternLine.dist, sternMax=self.sternLine.getMaxStretch(),
                    bowTension=self.bowLine.T, sternTension=self.sternLine.T,
                    bowHF=self.bowLine.HF, sternHF=self.sternLine.HF,
                    windForce=boat.fWind, waterDrag=boat.fWater, lineForce=boat.fLines, netForce=boat.F,
                    effectiveWind=self.env.getEffectiveWind(),
                    instability=self.lastStep['instability'], instabilityCount=self.instabilityCount,
                    feasible=self.clampInfo['feasible'])


    def plot2d(self, ax=None, color='k', title=""):
        '''Makes a side view of the harbor: seabed, water surface, dock,
        both mooring lines, anchor and hull.

        Parameters
        ----------
        ax : matplotlib axes, optional
            axes to draw on. A new figure is created if None.
        color : str, optional
            color of the mooring lines
        title : str, optional

        Returns
        -------
        fig, ax : matplotlib figure and axes
        '''

        import matplotlib.pyplot as plt

        if ax is None:
            fig, ax = plt.subplots(1, 1, figsize=(10, 4))
        else:
            fig = ax.get_figure()

        xMax = max(self.anchor.x0, self.boat.x + self.boat.length) + 100
        Xs = np.linspace(self.dock.x, xMax, 200)

        ax.fill_between([self.dock.x - 100, xMax], -40, 0, color='tan', alpha=0.5, lw=0)
        ax.plot(Xs, self.env.getWaveElevation(Xs), color='tab:blue', lw=1, alpha=0.7)

        rDock = self.bowLine.rA
        ax.fill_between([self.dock.x - 100, self.dock.x], 0, rDock[1], color='grey', alpha=0.6, lw=0)

        self.bowLine.drawLine2d(ax, color=color, label='bow line')
        self.sternLine.drawLine2d(ax, color=color, lw=1.5, label='stern line')

        ax.plot(self.anchor.x, 0, 'v', color='tab:red' if self.anchor.dragged else color, markersize=8)

        Xh, Yh = self.boat.getHullCoords()
        ax.fill(Xh, Yh, facecolor='white', edgecolor='k', zorder=3)

        ax.set_xlabel('x (cm)')
        ax.set_ylabel('elevation above seabed (cm)')
        ax.set_aspect('equal')
        ax.set_title(title if title else f"t = {self.env.time:.2f} s, {self.status}")

        return fig, ax



def tick(ms, dt=None, inputs=None):
    '''Advances a mooring system by one tick. The stages run in a fixed
    order, each using the results of the one before within the same tick:

    1. environment inputs and clock
    2. line shapes and tensions from the previous boat position
    3. boat dynamics (candidate position)
    4. anchor drag
    5. position clamp against both line reaches and the dock
    6. hull elevation, tilt and attachment points
    7. line shapes and tensions at the final position
    8. status classification

    Parameters
    ----------
    ms : System
        the mooring system, modified in place
    dt : float, optional
        time step [s]. The configured dt is used if None.
    inputs : dict, optional
        per-tick environment values (see System.setInputs)

    Returns
    -------
    ms : System
        the same mooring system
    '''

    if dt is None:
        dt = ms.dt

    if inputs:
        ms.setInputs(**inputs)
    ms.env.update(dt)
    ms.nTicks += 1

    if ms.isSunk:
        ms._sink()
        ms.lastStep = dict(F=0.0, instability=False, atRest=True)
        _report(ms)
        return ms

    boat = ms.boat
    env = ms.env
    rDock = ms.dock.getAttachment(env)
    bowMax = ms.bowLine.getMaxStretch()
    sternMax = ms.sternLine.getMaxStretch()

    ms.solveLines(rDock)

    ms.lastStep = boat.step(ms.sternLine.fB + ms.bowLine.fB, env.getEffectiveWind(), env.windDirection, dt)
    if ms.lastStep['instability']:
        ms.instabilityCount += 1

    # the anchor can't be dragged past the boat's stern
    ms.anchor.updateDrag(ms.sternLine.HF, env.time - ms.configTime, dt, boat.x + boat.halfL)

    x, ms.clampInfo = clampPosition(boat.x, boat.halfL, boat.y + boat.deckOffset, rDock, ms.anchor.r, bowMax, sternMax)
    if not ms.clampInfo['feasible']:
        boat.v = 0.0
    elif ms.clampInfo['clamped']*boat.v > 0:     # stop motion into the bound
        boat.v = 0.0
    boat.x = x
    boat.xLast = x

    ms.attitude = solveAttitude(boat, env, rDock, ms.anchor.r, bowMax, sternMax)
    ms.solveLines(rDock)

    status = classifyStatus(ms.attitude, ms.bowLine, ms.sternLine, ms.getBowGap(),
                            env.windSpeed, env.windDirection, isSunk=ms.isSunk)
    if status != ms.status:
        if status == SUNK:
            logger.warning("boat sunk at t=%.2f s: an attachment was pulled under its float line", env.time)
        else:
            logger.info("status changed from %s to %s at t=%.2f s", ms.status, status, env.time)
    ms.status = status
    ms.isSunk = status == SUNK

    _report(ms)
    return ms


def _report(ms):
    '''Passes the tick's snapshot to the debug hook and prints it if requested.'''

    if ms.debugHook is None and ms.display == 0:
        return

    snapshot = ms.getSnapshot()
    if ms.debugHook is not None:
        ms.debugHook(snapshot)
    if ms.display > 0:
        print(f"t={snapshot['time']:7.3f} s  x={snapshot['x']:7.1f} cm  v={snapshot['v']:7.3f} cm/tick  "
              f"stern {snapshot['sternDist']:.1f}/{snapshot['sternMax']:.1f} cm  bow {snapshot['bowDist']:.1f}/{snapshot['bowMax']:.1f} cm  "
              f"Ts={snapshot['sternTension']:.0f} N  Tb={snapshot['bowTension']:.0f} N  status={snapshot['status']}")
