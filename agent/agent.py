"""
MassBeacon — presence beacon agent
==================================
While the player stands in a tracked activity area, posts a beacon
(activity, world, players) every 15s and shows the aggregated per-world
counts from the beacon service. Optionally relays new sightings to a
webhook, at most once per minute for the same world/count.

Usage:
    python agent.py --region 10322 --world 301 --players 12
"""

import sys

from beacon_core.runner import run_with_auto_restart


if __name__ == "__main__":
    sys.exit(run_with_auto_restart())
