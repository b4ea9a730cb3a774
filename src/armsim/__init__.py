from .core.models import GlobalConfig, JointAngles, Pose
from .core.orientation import compose_flange_target, matrix_to_pose, pose_to_matrix
from .model.chain import end_effector_pose, forward_kinematics
from .model.dh_params import DHParameterSet, er50a_dh_params
from .adapters.program_parser import parse_global_vars, parse_trajectory
from .solvers.ik_solver import solve, solve_position
from .solvers.trajectories import generate_path, plan_path, plan_program
from .control.playback import TrajectoryPlayer

__all__ = [
    "DHParameterSet",
    "GlobalConfig",
    "JointAngles",
    "Pose",
    "TrajectoryPlayer",
    "compose_flange_target",
    "end_effector_pose",
    "er50a_dh_params",
    "forward_kinematics",
    "generate_path",
    "matrix_to_pose",
    "parse_global_vars",
    "parse_trajectory",
    "plan_path",
    "plan_program",
    "pose_to_matrix",
    "solve",
    "solve_position",
]
