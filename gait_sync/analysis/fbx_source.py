"""
FBX Source Module
Loads FBX files and samples their skeleton animation into AnimationClip objects.

Every skeleton bone is sampled once per frame with EvaluateGlobalTransform.
Positions are stored relative to the root bone's translation at the same
frame (the root itself sits at the origin) and remapped to Z-up, so the
gait reference code can read X as lateral, Y as forward and Z as height.

The FBX Python SDK is imported inside each function; the rest of the
package works without it.
"""

import os

import numpy as np

from gait_sync.analysis.animation import AnimationClip
from gait_sync.analysis.utils import fbx_vector_to_array


def load_fbx(path):
    """
    Load an FBX file and return the scene object and manager.

    IMPORTANT: Caller is responsible for destroying the manager when done:
        scene, manager = load_fbx(path)
        # ... use scene ...
        cleanup_fbx_scene(scene, manager)

    Args:
        path (str): Full path to the FBX file.

    Returns:
        tuple: (fbx.FbxScene, fbx.FbxManager) - The loaded scene and its manager

    Raises:
        FileNotFoundError: If the FBX file does not exist.
        RuntimeError: If FBX SDK fails to load or parse the file.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"FBX file not found: {path}")

    import fbx

    manager = fbx.FbxManager.Create()
    ios = fbx.FbxIOSettings.Create(manager, fbx.IOSROOT)
    manager.SetIOSettings(ios)
    importer = fbx.FbxImporter.Create(manager, "")

    if not importer.Initialize(path, -1, manager.GetIOSettings()):
        error = importer.GetStatus().GetErrorString()
        importer.Destroy()
        manager.Destroy()
        raise RuntimeError(f"FBX SDK failed to initialize: {error}")

    scene = fbx.FbxScene.Create(manager, "Scene")
    if not importer.Import(scene):
        error = importer.GetStatus().GetErrorString()
        importer.Destroy()
        manager.Destroy()
        raise RuntimeError(f"FBX SDK failed to import scene: {error}")

    importer.Destroy()
    return scene, manager


def cleanup_fbx_scene(scene, manager):
    """
    Destroy the manager (and with it the scene) to release SDK memory.

    Args:
        scene: FBX scene object (can be None)
        manager: FBX manager object (can be None)
    """
    if manager is not None:
        manager.Destroy()


def get_scene_metadata(scene):
    """
    Extract timing metadata from the first animation stack of a scene.

    Args:
        scene (fbx.FbxScene): The FBX scene object.

    Returns:
        dict: has_animation, start_time, stop_time, duration, frame_rate, anim_stack_name
    """
    import fbx

    stack_criteria = fbx.FbxCriteria.ObjectType(fbx.FbxAnimStack.ClassId)
    if scene.GetSrcObjectCount(stack_criteria) == 0:
        return {"has_animation": False}

    anim_stack = scene.GetSrcObject(stack_criteria, 0)
    scene.SetCurrentAnimationStack(anim_stack)
    take_info = anim_stack.GetLocalTimeSpan()
    start = take_info.GetStart().GetSecondDouble()
    stop = take_info.GetStop().GetSecondDouble()
    time_mode = scene.GetGlobalSettings().GetTimeMode()
    frame_rate = fbx.FbxTime.GetFrameRate(time_mode)

    return {
        "has_animation": True,
        "start_time": start,
        "stop_time": stop,
        "duration": stop - start,
        "frame_rate": frame_rate,
        "anim_stack_name": anim_stack.GetName(),
    }


def build_bone_hierarchy(scene):
    """
    Build a parent-child hierarchy map of all skeleton bones in the scene.

    Args:
        scene: FBX scene object

    Returns:
        dict: {child_name: parent_name}; root bones map to None
    """
    import fbx

    hierarchy = {}

    def traverse(node, parent_name=None):
        if node.GetNodeAttribute():
            attr_type = node.GetNodeAttribute().GetAttributeType()
            if attr_type == fbx.FbxNodeAttribute.EType.eSkeleton:
                bone_name = node.GetName()
                hierarchy[bone_name] = parent_name
                parent_name = bone_name

        for i in range(node.GetChildCount()):
            traverse(node.GetChild(i), parent_name)

    traverse(scene.GetRootNode(), parent_name=None)
    return hierarchy


def get_up_axis(scene):
    """
    Read the declared up axis of the scene.

    Returns:
        tuple: (axis_index, sign) with axis_index 0=X, 1=Y, 2=Z (Y if unknown)
    """
    import fbx

    up_vector, up_sign = scene.GetGlobalSettings().GetAxisSystem().GetUpVector()
    up_axis_map = {
        fbx.FbxAxisSystem.EUpVector.eXAxis: 0,
        fbx.FbxAxisSystem.EUpVector.eYAxis: 1,
        fbx.FbxAxisSystem.EUpVector.eZAxis: 2,
    }
    return up_axis_map.get(up_vector, 1), (1 if up_sign >= 0 else -1)


def to_z_up(positions, up_axis, up_sign=1):
    """
    Reorder (N, 3) positions so the up axis becomes Z.

    The two horizontal axes keep their relative order and become X and Y.
    """
    positions = np.asarray(positions, dtype=float)
    horizontal = [axis for axis in range(3) if axis != up_axis]
    remapped = positions[:, horizontal + [up_axis]].copy()
    remapped[:, 2] *= up_sign
    return remapped


def clip_from_scene(scene, name=None, root_bone=None):
    """
    Sample the skeleton animation of a scene into an AnimationClip.

    Args:
        scene: FBX scene object
        name (str, optional): Clip name (defaults to the animation stack name)
        root_bone (str, optional): Root bone name (defaults to the first parentless bone)

    Returns:
        AnimationClip: Root-relative, Z-up bone trajectories

    Raises:
        ValueError: If the scene has no animation or no skeleton
    """
    import fbx

    metadata = get_scene_metadata(scene)
    if not metadata["has_animation"]:
        raise ValueError("No animation data found in scene")

    hierarchy = build_bone_hierarchy(scene)
    if not hierarchy:
        raise ValueError("No skeleton bones found in scene")

    if root_bone is None:
        root_bone = next(bone for bone, parent in hierarchy.items() if parent is None)

    start = metadata["start_time"]
    rate = metadata["frame_rate"]
    duration = metadata["duration"]
    frame_count = int(round(duration * rate)) + 1

    nodes = {bone: scene.FindNodeByName(bone) for bone in hierarchy}
    nodes = {bone: node for bone, node in nodes.items() if node}
    if root_bone not in nodes:
        raise ValueError(f"Root bone {root_bone} not found in scene")

    global_positions = {bone: np.zeros((frame_count, 3)) for bone in nodes}
    for frame in range(frame_count):
        t = fbx.FbxTime()
        t.SetSecondDouble(start + frame / rate)
        for bone, node in nodes.items():
            global_positions[bone][frame] = fbx_vector_to_array(node.EvaluateGlobalTransform(t).GetT())

    up_axis, up_sign = get_up_axis(scene)
    root_global = global_positions[root_bone]
    bone_positions = {
        bone: to_z_up(positions - root_global, up_axis, up_sign)
        for bone, positions in global_positions.items()
        if bone != root_bone
    }

    print(f"✓ Sampled {len(nodes)} bones over {frame_count} frames ({rate:.1f} fps)")
    return AnimationClip(
        name or metadata["anim_stack_name"],
        duration,
        bone_positions,
        root_positions=to_z_up(root_global, up_axis, up_sign),
        bone_parents=hierarchy,
        root_bone=root_bone,
    )


def load_animation_clip(path, name=None, root_bone=None):
    """
    Load an FBX file and sample it into an AnimationClip (the SDK scene is released).

    Args:
        path (str): FBX file path
        name (str, optional): Clip name (defaults to the file name without extension)
        root_bone (str, optional): Root bone name

    Returns:
        AnimationClip
    """
    scene, manager = load_fbx(path)
    try:
        return clip_from_scene(scene, name or os.path.splitext(os.path.basename(path))[0], root_bone)
    finally:
        cleanup_fbx_scene(scene, manager)
