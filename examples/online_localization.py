"""
Example: Online 2-D localization.

A robot drives along a square; odometry arrives every step and an absolute
position fix every fourth step. The Bayes tree is updated per step and the
latest pose estimate printed.
"""

import numpy as np

from bayestree import GaussianFactor, ISAM, ISAMParams, marginal_covariance, optimize


def main():
    rng = np.random.default_rng(42)
    moves = [np.array([1.0, 0.0])] * 5 + [np.array([0.0, 1.0])] * 5 \
        + [np.array([-1.0, 0.0])] * 5 + [np.array([0.0, -1.0])] * 5

    isam = ISAM(ISAMParams())
    isam.update([GaussianFactor.prior(0, np.zeros(2), 1e-4 * np.eye(2))])

    truth = np.zeros(2)
    for i, move in enumerate(moves, start=1):
        truth = truth + move
        new = [GaussianFactor.between(i - 1, i, move + rng.normal(0.0, 0.05, 2), 0.0025 * np.eye(2))]
        if i % 4 == 0:
            new.append(GaussianFactor.prior(i, truth + rng.normal(0.0, 0.2, 2), 0.04 * np.eye(2)))
        isam.update(new)

        estimate = optimize(isam.tree)[i]
        sd = np.sqrt(np.diag(marginal_covariance(isam.tree, i)))
        print(f"step {i:2d}: estimate={np.round(estimate, 3)} truth={truth} sd={np.round(sd, 3)} "
              f"cliques={isam.tree.size()}")


if __name__ == "__main__":
    main()
