from __future__ import annotations

import jax.numpy as jnp

from infoslam import GraphSLAM


def setup_landmark_world() -> GraphSLAM:
    """
    Build a tiny 2D world:

      - 3 poses along +x, the first anchored at the origin:
          pose0 = [0, 0]
          pose1 ~ pose0 + [1, 0]
          pose2 ~ pose1 + [1, 0]

      - 2 landmarks above the path:
          lm10 seen from pose0 and pose1
          lm11 seen from pose2 only

    Odometry and landmark distances are slightly inconsistent, so the
    estimate is a least-squares compromise rather than any single reading.
    """
    slam = GraphSLAM(dimension=2)
    slam.register_anchor(0, jnp.array([0.0, 0.0]))

    # Odometry
    slam.add_transition(0, 1, jnp.array([1.05, 0.0]))
    slam.add_transition(1, 2, jnp.array([0.95, 0.02]))

    # Landmark observations
    slam.add_landmark_observation(0, 10, jnp.array([0.5, 2.0]))
    slam.add_landmark_observation(1, 10, jnp.array([-0.5, 2.1]))
    slam.add_landmark_observation(2, 11, jnp.array([0.0, -1.0]))

    return slam


def print_world_state(slam: GraphSLAM, label: str):
    print(f"\n=== {label} ===")
    for nid, value in slam.estimate().items():
        x, y = [float(v) for v in value]
        print(f"node{nid}: ({x:.3f}, {y:.3f})")


def main():
    slam = setup_landmark_world()
    print_world_state(slam, label="ESTIMATE")

    # Repeating a reading doubles its information, pulling the compromise
    # toward it.
    slam.add_transition(1, 2, jnp.array([0.95, 0.02]))
    print_world_state(slam, label="AFTER REPEATED ODOMETRY")


if __name__ == "__main__":
    main()
