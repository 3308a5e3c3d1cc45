#!/usr/bin/env python3
"""
Build a small square-lattice bundle in cadnano format and convert it to oxDNA.

Six 64-base virtual helices form a closed two-by-three bundle. A single
circular scaffold snakes through all of them; every helix carries one staple with a
skip and a two-base loop so that the twist redistribution can be inspected
in oxView (https://sulcgroup.github.io/oxdna-viewer/).

Usage:
    python convert_ring.py

Requirements:
    pip install -e .  (from the repository root)
"""
import json
import logging
from pathlib import Path

from oxlattice import convert_cadnano

HERE = Path(__file__).parent
N_HELICES = 6
LENGTH = 64
# (row, col) of each helix, walking around the bundle
GRID = [(0, 0), (0, 1), (0, 2), (1, 2), (1, 1), (1, 0)]


def build_design():
    vstrands = []
    for num in range(N_HELICES):
        scaf, stap = [], []
        forward = num % 2 == 0
        for p in range(LENGTH):
            before = p - 1 if forward else p + 1
            after = p + 1 if forward else p - 1
            sq = [num, before, num, after]
            if not 0 <= before < LENGTH:
                sq[0:2] = [-1, -1]
            if not 0 <= after < LENGTH:
                sq[2:4] = [-1, -1]
            scaf.append(sq)
            # staples run against the scaffold
            stap.append(sq[2:4] + sq[0:2])
        skip = [0] * LENGTH
        loop = [0] * LENGTH
        skip[20] = -1
        loop[44] = 2
        vstrands.append({
            'num': num, 'row': GRID[num][0], 'col': GRID[num][1],
            'scaf': scaf, 'stap': stap, 'skip': skip, 'loop': loop,
            'stap_colors': [[0 if num % 2 else LENGTH - 1, 0xCC0000 + num]],
            'scafLoop': [], 'stapLoop': [],
        })

    # scaffold crossovers alternate between the two helix ends
    for num in range(N_HELICES):
        nxt = (num + 1) % N_HELICES
        end = LENGTH - 1 if num % 2 == 0 else 0
        vstrands[num]['scaf'][end][2:4] = [nxt, end]
        vstrands[nxt]['scaf'][end][0:2] = [num, end]
    return {'name': 'six_helix_ring', 'vstrands': vstrands}


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    design_path = HERE / "ring.json"
    design_path.write_text(json.dumps(build_design()))
    print(f"Wrote cadnano design: {design_path.name}")

    system = convert_cadnano(design_path.read_text())

    scaffold = max(system.strands, key=lambda s: s.N)
    print(f"\nConversion result:")
    print(f"  Strands:     {system.N_strands}")
    print(f"  Nucleotides: {system.N}")
    print(f"  Scaffold:    {scaffold.N} nt, circular={scaffold.is_circular()}")
    print(f"  Warnings:    {len(system.issues)}")

    top, conf = system.to_oxdna()
    (HERE / "ring.top").write_text(top)
    (HERE / "ring.dat").write_text(conf)
    (HERE / "ring.oxview").write_text(system.to_oxview_string())
    print(f"\nWrote ring.top, ring.dat and ring.oxview")


if __name__ == "__main__":
    main()
