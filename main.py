# main.py
"""
Main entry point for the particle wind simulation.

This script orchestrates the entire application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the particle system, the frame driver, the window and the audio.
4. Runs the main loop until the window is closed.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config, limit_delta_time
import numpy as np
import cProfile
import pstats
import io


def main():
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Wind Simulation Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})
    audio_params = config.get('audio', {})

    from config import load_simulation_config
    from particle import ParticleSystem
    from simulation import Simulation
    from visualization import Visualizer
    from audio import AudioPlayer

    # --- Component Initialization ---
    physics, fields, wind = load_simulation_config(sim_params)
    particles = ParticleSystem(physics, seed=sim_params.get('seed'))
    sim = Simulation(particles, fields, wind)

    audio = AudioPlayer(audio_params.get('file', 'pronunciation_assessment.wav'),
                        audio_params.get('placeholder_level', 0.5))
    visualizer = Visualizer(vis_params, on_audio_toggle=audio.toggle)
    # The mixer is initialized by pygame.init() inside the visualizer.
    audio.load()

    log_throttle = run_params.get('log_throttle_steps', 300)
    max_steps = run_params.get('max_steps')
    max_delta_time = run_params.get('max_delta_time')

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    running = True
    if profiler is not None:
        profiler.enable()
    while running:
        running = visualizer.handle_events()
        if not running:
            break

        dt = limit_delta_time(visualizer.tick(), max_delta_time)
        width, height = visualizer.size

        audio.advance(dt)
        samples = audio.current_samples(particles.particle_count)
        sim.step(dt, width, height, visualizer.read_controls(), samples)

        visualizer.draw(particles, audio_on=audio.playing)

        # Hot loops must throttle logs
        step_num = sim.step_count
        if step_num % log_throttle == 0:
            logging.info(
                f"Frame {step_num}: {particles.particle_count} live particles, "
                f"{particles.expired_count} expired so far."
            )
            if particles.particle_count:
                speeds = np.linalg.norm([p.velocity for p in particles], axis=1)
                logging.debug(
                    f"Frame {step_num} | Average speed: {np.mean(speeds):.4f} | "
                    f"Wind: ({sim.wind.vector[0]:.2f}, {sim.wind.vector[1]:.2f})"
                )

        if max_steps is not None and step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    if profiler is not None:
        profiler.disable()

    audio.close()
    visualizer.close()
    logging.info("Simulation loop finished.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Wind Simulation Shutting Down ---")


if __name__ == "__main__":
    main()
