"""
Main Entry Point for the Focus Tracker

Runs one tracking session against the webcam: the capture actor analyzes
frames on its own thread while this thread polls the control actor, then
prints the session summary.
"""

import argparse
import json
import logging
import time
from typing import Any, Dict, Optional

from .config import load_config, settings_from_config
from .integration import SessionHistory, SessionTracker
from .real_time import CaptureActor, Channel, ControlActor, LandmarkSource
from .types import TrackingSession


def setup_logging(log_level: str = 'INFO', log_file: Optional[str] = None):
    """Setup logging configuration."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def create_landmark_source(config: Dict[str, Any]) -> LandmarkSource:
    """Build the MediaPipe webcam source from the ``camera`` section."""
    from .real_time.mediapipe_source import MediaPipeLandmarkSource

    camera = config['camera']
    return MediaPipeLandmarkSource(
        camera_id=camera['device_id'],
        resolution=(camera['width'], camera['height']),
        model_path=camera['model_path'],
    )


def log_session_summary(session: TrackingSession):
    metrics = session.metrics
    logging.info("=== Session Summary ===")
    logging.info(f"Duration: {session.total_duration:.1f} seconds")
    logging.info(f"Focused: {metrics.time_focused:.1f}s, distracted: {metrics.time_distracted:.1f}s")
    logging.info(f"Efficiency: {metrics.efficiency:.1f}%")
    logging.info(f"Average engagement: {metrics.average_engagement:.1f}")
    logging.info(f"Blinks: {metrics.total_blinks} ({metrics.average_blink_rate:.1f} per minute)")
    logging.info(
        f"Engagement frames: {metrics.time_fully_engaged} full, "
        f"{metrics.time_partially_engaged} partial, {metrics.time_disengaged} disengaged"
    )


def run_tracking_session(config: Dict[str, Any], duration: Optional[float] = None,
                         output_path: Optional[str] = None,
                         source: Optional[LandmarkSource] = None) -> Optional[TrackingSession]:
    """
    Run one tracking session until the duration elapses or Ctrl+C.

    Args:
        config: Application configuration
        duration: Maximum duration in seconds (None for unlimited)
        output_path: Path to save the finished session as JSON
        source: Landmark source; the MediaPipe webcam source by default

    Returns:
        The finished session, or None if tracking never started
    """
    settings = settings_from_config(config)
    session_config = config['session']

    history = SessionHistory()
    tracker = SessionTracker(
        settings,
        history_capacity=session_config['history_capacity'],
        on_session_finished=history.add_session,
    )

    downstream = Channel('commands')
    upstream = Channel('events')
    capture = CaptureActor(
        source or create_landmark_source(config),
        downstream,
        upstream,
        settings,
        watchdog_interval=session_config['watchdog_interval'],
        watchdog_timeout=session_config['watchdog_timeout'],
    )
    control = ControlActor(upstream, downstream, tracker)

    capture.start()
    control.start_tracking()

    start_time = time.time()
    last_report = start_time
    logging.info("Starting focus tracking, press Ctrl+C to stop")

    session = None
    try:
        while duration is None or time.time() - start_time < duration:
            control.poll(timeout=0.1)

            # Log progress periodically
            if time.time() - last_report >= 10.0 and tracker.latest_sample is not None:
                last_report = time.time()
                engagement = tracker.latest_sample.engagement
                logging.info(
                    f"Engagement {engagement.level}, "
                    f"{len(tracker.history)} samples, camera active: {tracker.camera_status.active}"
                )
        logging.info(f"Duration limit of {duration} seconds reached")

    except KeyboardInterrupt:
        logging.info("Tracking interrupted by user")

    finally:
        session = control.stop_tracking()
        capture.shutdown()

    if tracker.last_error:
        logging.warning(f"Last capture error: {tracker.last_error}")

    if session is not None:
        log_session_summary(session)
        if output_path:
            with open(output_path, 'w') as f:
                json.dump(session.to_dict(), f, indent=2)
            logging.info(f"Session data saved to {output_path}")

    return session


def main():
    """Main function with command line interface."""
    parser = argparse.ArgumentParser(description='Webcam focus and engagement tracker')

    parser.add_argument('--config', '-c', type=str, default='config/settings.yaml',
                       help='Path to configuration file')
    parser.add_argument('--camera', type=int, default=None,
                       help='Camera device index (overrides the config file)')
    parser.add_argument('--output', '-o', type=str, default=None,
                       help='Output path for the session JSON')
    parser.add_argument('--duration', '-d', type=float, default=None,
                       help='Maximum duration in seconds')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                       default=None, help='Logging level (overrides the config file)')

    args = parser.parse_args()

    config = load_config(args.config)
    if args.camera is not None:
        config['camera']['device_id'] = args.camera
    if args.log_level is not None:
        config['logging']['level'] = args.log_level

    setup_logging(config['logging']['level'], config['logging']['log_file'])

    run_tracking_session(config, args.duration, args.output)


if __name__ == '__main__':
    main()
