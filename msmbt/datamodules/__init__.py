from msmbt.datamodules.dataloader import ReturnsDataloader
from msmbt.datamodules.writer import results_frame, write_results
