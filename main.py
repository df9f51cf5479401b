"""
main.py — Bootstrap

1. Load tuning constants
2. Build the simulation (terrain + player)
3. Create the app and push the world scene
4. Run

    python main.py                 # random seed, 128x128
    python main.py --seed 42 --size 256
"""

import argparse

from core import tuning
from core.app import App
from core.constants import DEFAULT_MAP_SIZE, MAP_SIZES
from core.settings import InvalidConfiguration, TerrainSettings
from scenes.world_scene import WorldScene
from simulation.world_sim import WorldSim


def main(argv=None):
    parser = argparse.ArgumentParser(description="Tile world simulator")
    parser.add_argument("--seed", type=float, default=None)
    parser.add_argument("--size", type=int, default=DEFAULT_MAP_SIZE, choices=MAP_SIZES)
    args = parser.parse_args(argv)

    tuning.load()

    terrain = TerrainSettings.from_tuning()
    if args.seed is not None:
        try:
            terrain = terrain.with_changes(seed=args.seed)
        except InvalidConfiguration as exc:
            parser.error(str(exc))
    sim = WorldSim(size=args.size, terrain_settings=terrain)

    app = App(title="Tile World", width=960, height=640)
    app.push_scene(WorldScene(sim))
    app.run()


if __name__ == "__main__":
    main()
