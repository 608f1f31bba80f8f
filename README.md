# reformant

Building blocks for speech analysis and a small INI file library, in pure
Python with no third-party dependencies.

## What is inside

- `reformant.windows`: rectangular, Hamming, cos⁴ and Hann analysis windows
  (`rwindow`, `hwindow`, `cwindow`, `hnwindow`). Each takes `n` samples from
  an offset into a signal, with optional pre-emphasis. `w_window` picks the
  window by `WindowType`. A signal that is too short raises `ValueError`.
- `reformant.lpc`: linear prediction.
  - `autoc` computes the normalised autocorrelation and the rms.
  - `durbin` runs the Levinson–Durbin recursion.
  - `lpc` does windowed autocorrelation LPC and returns the predictor
    polynomial and the gain.
  - `lpcbsa` does stabilised weighted covariance LPC with dither. It takes an
    optional `random.Random` so that results can be reproduced.
  - `w_covar` does covariance-method LPC and returns a `CovarResult`.
  - The helpers it rests on are also available: `dchlsky`, `dlwrtrn`,
    `dreflpc`, `dcovlpc`, `dcwmtrx` and `dlpcwtd`.

  Analyses that cannot produce a result raise `LpcError`, a subclass of
  `ValueError`.
- `reformant.peaks`: `find_peaks` picks peaks that stand out by a quarter of
  the curve's range. `parabolic_interpolation` refines an extremum. It also
  offers the small vector helpers `diff`, `product`, `find_indices_less_than`,
  `select_elements` and `sign_vector`.
- `reformant.ini`: an order-preserving INI reader and writer.
  - Sections and keys are trimmed. They are lower-cased unless
    `case_sensitive=True` is given.
  - `IniFile.read()` returns an `IniStructure`.
  - `IniFile.generate()` overwrites the file.
  - `IniFile.write()` updates an existing file and keeps its comments and
    layout.
  - `parse_ini`, `generate_ini`, `parse_line`, `split_lines` and
    `lazy_update` work on text and lines directly.

## Installation

```
pip install .
```

## Examples

LPC coefficients of one Hamming-windowed frame:

```python
from reformant.lpc import lpc
from reformant.windows import WindowType

coefficients, gain = lpc(12, 70.0, 400, samples, 0, 0.7, WindowType.HAMMING)
```

Peaks in a curve:

```python
from reformant.peaks import find_peaks

indices = find_peaks([0.0, 2.0, 0.0, 5.0, 1.0, 3.0, 0.0], 1)
```

Updating an INI file while keeping its comments:

```python
from reformant.ini import IniFile

config = IniFile("example.ini")
data = config.read()
data["display"]["fft_length"] = "2048"
config.write(data, pretty=True)
```

## What it does not do

The package has no application settings object or settings storage beyond the
INI library. It does not find polynomial roots or track formants and poles
across a signal. It provides no command-line program. Audio input and output
are out of scope, and so is any user interface.

## Running the tests

```
pip install .[test]
pytest
```