"""Pure signal and accumulator functions used by the engine."""
