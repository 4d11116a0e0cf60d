TF_MODULE = "tensorflow"

DEFAULT_PRIORITY = 5
DEFAULT_ENVIRONMENT = "tfbridge"

# Interpreter override, forwarded to the runtime's selection variable
TENSORFLOW_PYTHON_ENV = "TENSORFLOW_PYTHON"
# Source of Config().cpp_min_log_level
CPP_MIN_LOG_LEVEL_OPTION_ENV = "TFBRIDGE_CPP_MIN_LOG_LEVEL"
# Read by the TensorFlow C++ runtime
TF_CPP_MIN_LOG_LEVEL_ENV = "TF_CPP_MIN_LOG_LEVEL"

TENSOR_CLASS = "tensorflow.tensor"
TENSOR_FOREIGN_CLASSES = (
    "tensorflow.python.ops.variables.Variable",
    "tensorflow.python.framework.ops.Tensor",
)

TF_API_DOCS = "https://www.tensorflow.org/api_docs/python/"
INSTALL_HINT = "You can install TensorFlow using `pip install tensorflow`."
