from runas.domain.execution.model.child import ChildExecution
from runas.domain.execution.model.description import Description
from runas.domain.execution.model.descriptor import TestClass, TestMethod

__all__ = ["ChildExecution", "Description", "TestClass", "TestMethod"]
