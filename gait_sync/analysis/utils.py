"""
Utilities Module
Common helper functions for output files and data conversion.
"""

import os

import numpy as np

# ============================================================================
# File I/O Utilities
# ============================================================================


def ensure_output_dir(filepath):
    """
    Ensure the output directory exists for a given filepath.

    Args:
        filepath (str): Full path to output file.
    """
    directory = os.path.dirname(filepath)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def safe_overwrite(filepath):
    """
    Safely remove existing file to force overwrite.

    Args:
        filepath (str): Path to file to overwrite.

    Raises:
        RuntimeError: If file is locked or permission denied.
    """
    if os.path.exists(filepath):
        try:
            os.remove(filepath)
        except PermissionError:
            raise RuntimeError(
                f"Cannot overwrite {filepath} - file may be open in another program. Please close it and try again."
            )


def prepare_output_file(filepath):
    """
    Prepare output file by ensuring directory exists and clearing old file.

    Args:
        filepath (str): Path to output file.
    """
    ensure_output_dir(filepath)
    safe_overwrite(filepath)


# ============================================================================
# Data Conversion Utilities
# ============================================================================


def fbx_vector_to_array(fbx_vec):
    """
    Convert an FBX vector (FbxVector4, FbxDouble3, ...) to a 3-component NumPy array.

    Args:
        fbx_vec: FBX vector object

    Returns:
        np.array: (3,) array
    """
    if hasattr(fbx_vec, "mData"):
        return np.array([fbx_vec.mData[0], fbx_vec.mData[1], fbx_vec.mData[2]], dtype=float)
    return np.array([fbx_vec[0], fbx_vec[1], fbx_vec[2]], dtype=float)


def convert_numpy_to_native(obj):
    """
    Recursively convert NumPy types to native Python types for JSON serialization.

    Args:
        obj: Object potentially containing NumPy types

    Returns:
        Object with NumPy types converted to native Python types
    """
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {key: convert_numpy_to_native(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy_to_native(item) for item in obj]
    else:
        return obj
