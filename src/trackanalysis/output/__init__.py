from .sinks import ApproachPointCsvSink, JsonlSink, ResultSinks, approach_point_record

__all__ = ["ApproachPointCsvSink", "JsonlSink", "ResultSinks", "approach_point_record"]
