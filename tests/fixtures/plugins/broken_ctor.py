"""Plugin whose analyzer cannot be constructed."""

from diag_runner.analyzers import Analyzer, RuleDescriptor


class PluginConfigError(Exception):
    pass


class NeedsConfigAnalyzer(Analyzer):
    supported_rules = (RuleDescriptor("CFG001", "needs config"),)

    def __init__(self):
        raise PluginConfigError("missing rule configuration")

    def analyze(self, compilation):
        return []
