# moorsim Example Script:
# Example of setting up a moored boat from a YAML configuration, running it
# through a gusty wind from the dock and plotting the harbor at a few instants.

import os
import numpy as np
import matplotlib.pyplot as plt
import moorsim as ms


# ----- load the harbor configuration -----

here = os.path.dirname(os.path.realpath(__file__))
harbor = ms.System(config=os.path.join(here, 'harbor.yaml'))

# ----- run for 20 seconds, keeping a time history -----

times, xs, bowT, sternT, status = [], [], [], [], []

fig, axes = plt.subplots(3, 1, sharex=True, figsize=(10, 9))
snapTicks = [0, 600, 1199]           # ticks to draw the harbor at

for i in range(1200):
    ms.tick(harbor)

    snap = harbor.getSnapshot()
    times.append(snap['time'])
    xs.append(snap['x'])
    bowT.append(snap['bowTension'])
    sternT.append(snap['sternTension'])
    status.append(snap['status'])

    if i in snapTicks:
        harbor.plot2d(ax=axes[snapTicks.index(i)])

print(f"final status: {status[-1]}, anchor dragged: {harbor.anchor.dragged}")
print(f"boat position range: {np.min(xs):.1f} to {np.max(xs):.1f} cm")

# ----- time histories -----

fig2, ax2 = plt.subplots(2, 1, sharex=True)
ax2[0].plot(times, xs)
ax2[0].set_ylabel('hull center x (cm)')
ax2[1].plot(times, bowT, label='bow line')
ax2[1].plot(times, sternT, label='stern line')
ax2[1].set_ylabel('tension (N)')
ax2[1].set_xlabel('time (s)')
ax2[1].legend()

plt.show()
