"""Adapters from perception pipeline outputs to FrameInput."""
