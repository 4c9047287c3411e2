from typing import Dict


def init_metrics() -> Dict[str, int | float | bool | None]:
    return {
        'seed': None,
        'target_path_length': 0,
        'main_path_rooms': 0,
        'main_path_degenerate': False,
        'branch_rooms': 0,
        'sub_branches': 0,
        'loops_created': 0,
        'rooms': 0,
        'chests': 0,
        'locked_chests': 0,
        'enemies': 0,
        'runtime_ms': 0.0,
    }
