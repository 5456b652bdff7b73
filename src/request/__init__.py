"""Request processing against API descriptions.

- **message**: ApiRequest and RequestMeta
- **coercion**: Raw string to primitive type conversion
- **assembler**: Candidate parameter set assembly
- **validation**: JSON-schema validation of the assembled parameters
- **hydration**: Temporal values and typed request bodies
- **processor**: The pipeline tying the steps together
"""
