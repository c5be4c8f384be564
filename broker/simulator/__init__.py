from broker.simulator.events import Event, EventType
from broker.simulator.engine import DispatchSimulator
from broker.simulator.generator import ScenarioGenerator
from broker.simulator.scenario import Scenario, load_scenario, save_scenario

__all__ = [
    "Event", "EventType", "DispatchSimulator", "ScenarioGenerator",
    "Scenario", "load_scenario", "save_scenario",
]
