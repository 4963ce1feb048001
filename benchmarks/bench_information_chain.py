# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.

import time

import jax.numpy as jnp

from infoslam import GraphSLAM, SolveConfig
from infoslam.slam.measurements import relative_offset_residual


def build_chain_session(num_poses: int = 100, landmark_every: int = 5, method: str = "lu"):
    """
    Straight 2D pose chain with a landmark hanging off every few poses:

        p0 --+1x--> p1 --+1x--> ... --+1x--> p_{N-1}
                     |
                     +--(0, 2)--> l_i

    - p0 is anchored at the origin.
    - Landmark ids start at 10_000 so they never collide with pose ids.
    - Every landmark is seen twice (from the pose before and the pose
      after it), so the graph has cycles and redundant information.
    """
    slam = GraphSLAM(dimension=2, solve_config=SolveConfig(method=method))
    slam.register_anchor(0, jnp.zeros(2))

    step = jnp.array([1.0, 0.0])
    for i in range(1, num_poses):
        slam.add_transition(i - 1, i, step)

    landmark_ids = []
    for i in range(1, num_poses - 1, landmark_every):
        lid = 10_000 + i
        slam.add_landmark_observation(i, lid, jnp.array([0.0, 2.0]))
        slam.add_landmark_observation(i + 1, lid, jnp.array([-1.0, 2.0]))
        landmark_ids.append(lid)

    return slam, landmark_ids


def run_benchmark(num_poses: int = 200, method: str = "lu"):
    print("=== Information-form GraphSLAM chain benchmark ===")
    print(f"num_poses = {num_poses}, method = {method}")

    t0 = time.time()
    slam, landmark_ids = build_chain_session(num_poses, method=method)
    t1 = time.time()
    print(f"state_dim = {slam.state_dim}")
    print(f"Build time:  {(t1 - t0) * 1000.0:.3f} ms")

    # Warmup
    mu = slam.estimate_state()
    if hasattr(mu, "block_until_ready"):
        mu.block_until_ready()

    t0 = time.time()
    values = slam.estimate()
    t1 = time.time()
    print(f"Solve time:  {(t1 - t0) * 1000.0:.3f} ms")

    # Every odometry step should be reproduced by the estimate.
    step = jnp.array([1.0, 0.0])
    worst = 0.0
    for i in range(1, num_poses):
        x = jnp.concatenate([values[i - 1], values[i]])
        r = relative_offset_residual(x, {"offset": step})
        worst = max(worst, float(jnp.max(jnp.abs(r))))
    print(f"max odometry residual: {worst:.2e}")

    last = num_poses - 1
    print(f"pose{last} (est):   {values[last]}")
    if landmark_ids:
        print(f"landmark{landmark_ids[-1]} (est): {values[landmark_ids[-1]]}")


if __name__ == "__main__":
    # Example:
    #   PYTHONPATH=src python3 benchmarks/bench_information_chain.py
    run_benchmark(num_poses=200, method="lu")
    run_benchmark(num_poses=200, method="cholesky")
