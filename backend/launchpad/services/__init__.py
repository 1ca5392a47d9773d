from .chain import Deployment, SimulatedDeployer
from .content import SyntheticContentStore
from .pipeline import CoinNotFound, DeploymentPipeline, deployment_stage
from .social import SimulatedPoster

__all__ = [
    "CoinNotFound",
    "Deployment",
    "DeploymentPipeline",
    "SimulatedDeployer",
    "SimulatedPoster",
    "SyntheticContentStore",
    "deployment_stage",
]
