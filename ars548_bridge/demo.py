#!/usr/bin/env python3
"""
ARS548 Bridge Demo — Synthetic Frame Walkthrough
==================================================

Run with:
    python -m ars548_bridge.demo                    # 10 frames, 5 objects
    python -m ars548_bridge.demo --frames 20 -n 8   # longer run, more objects
    python -m ars548_bridge.demo --save             # also save a bird's-eye PNG

Generates synthetic detection and object frames, runs them through a
RadarFrameBridge with in-process publishers and prints what each destination
received. Objects drop out and re-enter at random so marker deletions show up.
"""

import argparse
import logging
import os
from typing import List, Optional

import numpy as np

from .bridge import BridgePublishers, RadarFrameBridge
from .config import SensorConfiguration, SensorModel, load_config
from .frames import Detection, DetectionList, Header, ObjectList, TrackedObject, Vector3
from .markers import BOX_NAMESPACE

DEFAULT_CONFIG = SensorConfiguration(
    sensor_model=SensorModel.CONTINENTAL_ARS548,
    host_ip='10.13.1.166',
    sensor_ip='10.13.1.114',
    data_port=42102,
    frame_id='continental',
    base_frame='base_link',
    object_frame='base_link',
)


def generate_detection_frame(rng: np.random.RandomState, stamp: float, frame_id: str,
                             n_detections: int = 40,
                             invalid_rate: float = 0.1) -> DetectionList:
    """Uniform clutter in front of the sensor, some detections flagged invalid."""
    detections = []
    for i in range(n_detections):
        flags = rng.rand(4) < invalid_rate / 4
        detections.append(Detection(
            range=float(rng.uniform(1.0, 150.0)),
            azimuth_angle=float(rng.uniform(-np.pi / 3, np.pi / 3)),
            elevation_angle=float(rng.uniform(-0.05, 0.05)),
            range_std=0.1,
            azimuth_angle_std=0.005,
            elevation_angle_std=0.01,
            range_rate=float(rng.normal(0.0, 5.0)),
            rcs=float(rng.uniform(-10.0, 30.0)),
            measurement_id=i,
            positive_predictive_value=int(rng.randint(50, 101)),
            multi_target_probability=int(rng.randint(0, 30)),
            invalid_azimuth=bool(flags[0]),
            invalid_distance=bool(flags[1]),
            invalid_elevation=bool(flags[2]),
            invalid_range_rate=bool(flags[3]),
        ))
    return DetectionList(header=Header(stamp=stamp, frame_id=frame_id), detections=detections)


def generate_object_frames(n_frames: int = 10, n_objects: int = 5, dt: float = 0.05,
                           dropout: float = 0.2, seed: int = 42,
                           frame_id: str = 'continental') -> List[ObjectList]:
    """Constant-velocity objects; each frame every object may be missing."""
    rng = np.random.RandomState(seed)
    start = rng.uniform([5.0, -20.0], [120.0, 20.0], size=(n_objects, 2))
    velocity = rng.normal(0.0, 5.0, size=(n_objects, 2))
    yaw = rng.uniform(-np.pi, np.pi, size=n_objects)
    scores = rng.randint(0, 101, size=(n_objects, 6))

    frames = []
    for k in range(n_frames):
        objects = []
        for i in range(n_objects):
            if rng.rand() < dropout:
                continue
            pos = start[i] + velocity[i] * k * dt
            objects.append(TrackedObject(
                object_id=i + 1,
                age=int(k * dt * 1000),
                status_measurement=int(rng.choice([0, 1, 2])),
                status_movement=int(rng.choice([0, 1])),
                position_reference=int(rng.randint(0, 9)),
                position=Vector3(float(pos[0]), float(pos[1]), 0.5),
                position_std=Vector3(0.2, 0.2, 0.5),
                position_covariance_xy=0.01,
                orientation=float(yaw[i]),
                classification_unknown=int(scores[i, 0]),
                classification_car=int(scores[i, 1]),
                classification_truck=int(scores[i, 2]),
                classification_motorcycle=int(scores[i, 3]),
                classification_bicycle=int(scores[i, 4]),
                classification_pedestrian=int(scores[i, 5]),
                absolute_velocity=Vector3(float(velocity[i, 0]), float(velocity[i, 1]), 0.0),
                absolute_velocity_std=Vector3(0.5, 0.5, 0.0),
                relative_velocity=Vector3(float(velocity[i, 0]), float(velocity[i, 1]), 0.0),
                shape_length_edge_mean=4.5,
                shape_width_edge_mean=1.8,
            ))
        frames.append(ObjectList(header=Header(stamp=k * dt, frame_id=frame_id),
                                 objects=objects))
    return frames


def subscribe_all(publishers: BridgePublishers):
    for publisher in vars(publishers).values():
        publisher.subscribe()


def run_demo(n_frames: int = 10, n_objects: int = 5, seed: int = 42,
             config: Optional[SensorConfiguration] = None,
             save: bool = False, output_dir: str = '.') -> RadarFrameBridge:
    config = config or DEFAULT_CONFIG
    publishers = BridgePublishers()
    subscribe_all(publishers)
    bridge = RadarFrameBridge(config, publishers)

    rng = np.random.RandomState(seed)
    object_frames = generate_object_frames(n_frames, n_objects, seed=seed,
                                           frame_id=config.frame_id)

    print("━━━ ARS548 Bridge Demo ━━━")
    print(f"  {'frame':>5} {'points':>6} {'returns':>7} {'objects':>7} "
          f"{'tracks':>6} {'markers':>7} {'deletes':>7}")
    for k, object_frame in enumerate(object_frames):
        detection_frame = generate_detection_frame(rng, object_frame.header.stamp,
                                                   config.frame_id)
        bridge.on_detection_list(detection_frame)
        bridge.on_object_list(object_frame)

        cloud = publishers.detection_pointcloud.messages[-1]
        scan = publishers.scan_raw.messages[-1]
        tracks = publishers.objects_raw.messages[-1]
        markers = publishers.objects_markers.messages[-1]
        print(f"  {k:>5} {len(cloud):>6} {len(scan.returns):>7} "
              f"{len(object_frame.objects):>7} {len(tracks.tracks):>6} "
              f"{len(markers.additions):>7} {len(markers.deletions):>7}")

    if save:
        path = os.path.join(output_dir, 'ars548_bridge_demo.png')
        plot_last_frame(publishers, save_path=path)
        print(f"  Bird's-eye view saved to: {path}")

    print("━━━ Demo complete. ━━━")
    return bridge


def plot_last_frame(publishers: BridgePublishers, save_path: str):
    """Bird's-eye view of the last detection cloud and object boxes."""
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    cloud = publishers.detection_pointcloud.messages[-1]
    markers = publishers.objects_markers.messages[-1]

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.scatter(cloud.points['x'], cloud.points['y'], s=6, c='#888888', label='Detections')
    for marker in markers.additions:
        if marker.ns != BOX_NAMESPACE:
            continue
        _, _, qz, qw = marker.orientation
        yaw = 2.0 * np.arctan2(qz, qw)
        c, s = np.cos(yaw), np.sin(yaw)
        local = np.array([[p.x, p.y] for p in marker.points])
        world = local @ np.array([[c, s], [-s, c]]) + [marker.position.x, marker.position.y]
        ax.plot(world[:, 0], world[:, 1], '-',
                color=(marker.color.r, marker.color.g, marker.color.b))
        ax.annotate(str(marker.id), (marker.position.x, marker.position.y))
    ax.set_xlabel('x [m]')
    ax.set_ylabel('y [m]')
    ax.set_aspect('equal')
    ax.legend(loc='upper right')
    fig.savefig(save_path, dpi=120)
    plt.close(fig)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='ARS548 Bridge Demo: synthetic frames through the bridge')
    parser.add_argument('--frames', '-f', type=int, default=10,
                        help='Number of frames (default: 10)')
    parser.add_argument('--objects', '-n', type=int, default=5,
                        help='Number of synthetic objects (default: 5)')
    parser.add_argument('--seed', type=int, default=42)
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='YAML sensor configuration')
    parser.add_argument('--save', action='store_true',
                        help="Save a bird's-eye PNG of the last frame")
    parser.add_argument('--output-dir', '-o', type=str, default='.',
                        help='Output directory for the PNG (default: current)')
    parser.add_argument('--verbose', '-v', action='store_true')

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    config = load_config(args.config) if args.config else None
    run_demo(n_frames=args.frames, n_objects=args.objects, seed=args.seed,
             config=config, save=args.save, output_dir=args.output_dir)


if __name__ == '__main__':
    main()
