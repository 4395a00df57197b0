# moorsim Example Script:
# Example of an anchor dragging under strong onshore wind with a short stern
# line, followed by a mooring reconfiguration that lengthens the scope.

import logging
import matplotlib.pyplot as plt
import moorsim as ms

# log the drag onset and status changes
logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s: %(message)s")


# ----- a short stern line and a strong wind from the sea -----

harbor = ms.System(sternChainLengthCm=300, sternRopeLengthCm=100, anchorPositionCm=600,
                   windSpeedMs=20, windDirection=1, gustFactor=0)

times, anchorX, sternHF = [], [], []

def record(snap):
    times.append(snap['time'])
    anchorX.append(snap['anchorX'])
    sternHF.append(snap['sternHF'])

harbor.debugHook = record

for i in range(900):
    harbor.tick()

print(f"anchor moved {harbor.anchor.x0 - harbor.anchor.x:.1f} cm toward the dock")

# ----- more scope in a calmer wind: the anchor is reset and holds again -----

harbor.configure(sternChainLengthCm=600, anchorPositionCm=800, windSpeedMs=12)

for i in range(900):
    harbor.tick()

fig, ax = plt.subplots(2, 1, sharex=True)
ax[0].plot(times, anchorX)
ax[0].set_ylabel('anchor x (cm)')
ax[1].plot(times, sternHF)
ax[1].axhline(harbor.anchor.holdingForce, color='r', ls='--', lw=1)
ax[1].set_ylabel('stern horizontal tension (N)')
ax[1].set_xlabel('time (s)')

harbor.plot2d()
plt.show()
