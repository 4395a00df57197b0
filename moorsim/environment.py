
import numpy as np


WAVE_LENGTH = 600.0     # [cm]
WAVE_SPEED  = 100.0     # [cm/s]
WAVE_K      = 2*np.pi/WAVE_LENGTH
WAVE_MOD_FREQ = 0.84    # wave amplitude modulation frequency [rad/s]
GUST_FREQ     = 0.54    # gust frequency [rad/s]


class Environment():
    '''Environmental forcing consumed by the simulation each tick: wind,
    water level and waves. Values may be held fixed or overwritten every
    tick by an outside weather generator.'''

    def __init__(self, seabedDepth=100.0, waterLevel=20.0, waveHeight=10.0, windSpeed=5.0, windDirection=-1,
                 gustFactor=0.35):
        '''Initialize Environment attributes

        Parameters
        ----------
        seabedDepth : float
            depth of the seabed below the reference level [cm]
        waterLevel : float
            still water level above the reference level [cm]
        waveHeight : float
            nominal wave amplitude [cm]
        windSpeed : float
            nominal wind speed [m/s]
        windDirection : int
            +1 for wind from the sea (toward the dock), -1 for wind from the dock
        gustFactor : float
            relative gust strength, 0 for a steady wind
        '''

        self.seabedDepth = float(seabedDepth)
        self.waterLevel = float(waterLevel)
        self.waveHeight = float(waveHeight)
        self.windSpeed = float(windSpeed)
        self.windDirection = windDirection
        self.gustFactor = float(gustFactor)

        self.time = 0.0         # simulated time [s]
        self.wavePhase = 0.0    # [rad]


    def reset(self):
        self.time = 0.0
        self.wavePhase = 0.0


    def update(self, dt):
        '''Advances the clock and the travelling wave field by dt [s].'''
        self.time += dt
        # waves run with the wind: toward the dock (-x) for wind from the sea
        self.wavePhase += WAVE_SPEED*dt*WAVE_K*self.windDirection


    def getSurface(self):
        '''still water surface elevation above the seabed [cm]'''
        return self.seabedDepth + self.waterLevel


    def getWaveAmplitude(self):
        return self.waveHeight*(1 + 0.2*np.sin(WAVE_MOD_FREQ*self.time))


    def getWaveElevation(self, x):
        '''Returns the water surface elevation above the seabed at x [cm] (scalar or array).'''
        return self.getSurface() + np.sin(np.asarray(x)*WAVE_K + self.wavePhase)*self.getWaveAmplitude()


    def getEffectiveWind(self):
        '''Returns the gusting wind speed [m/s] (always >= 0).'''
        gust = 1 + self.gustFactor*(1 + np.sin(GUST_FREQ*self.time))
        return abs(self.windSpeed)*gust
